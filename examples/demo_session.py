"""
Demo session for the bundled sample dataset.

Loads the sample movies collection, selects a few fields, builds a bar and a
stacked bar chart and writes the last one to standalone HTML.
"""

import asyncio
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.append(str(Path(__file__).parent.parent))

from dotenv import load_dotenv
from loguru import logger

from chartdeck.charts import PlotlyRenderer, sanitize_filename
from chartdeck.connectors import SampleDataProvider
from chartdeck.session.chart_session import ChartSession, Notice
from chartdeck.utils.data_processors import DataProcessors

logger.remove()
logger.add(sys.stderr, level="INFO")

# Load environment variables from .env file
load_dotenv()


def show_notice(notice: Notice) -> None:
    """Print a session notice."""
    print(f"[{notice.level.upper()}] {notice.title}: {notice.message}")


def display_build(session: ChartSession) -> None:
    """
    Display the current build result.

    Args:
        session: Session whose latest result is shown

    """
    print("\n" + "=" * 80)
    result = session.build_result
    if not result.success:
        print(f"No chart: {result.diagnostic}")
    else:
        spec = result.spec
        print(f"📊 {spec.title} ({len(spec.data)} rows)")
        print("-" * 40)
        print(json.dumps(spec.model_dump(exclude_none=True)["series"], indent=2))
        print(f"Export filename: {sanitize_filename(spec.title)}")
    print("=" * 80 + "\n")


async def main() -> None:
    """Run the demo."""
    session = ChartSession(notifier=show_notice, debounce_seconds=0)
    await session.load_from(SampleDataProvider().load_dataset)

    profile = DataProcessors.analyze_dataset(session.dataset)
    print(f"Loaded {profile['row_count']} rows, {profile['column_count']} fields")

    for field in ("rated", "runtime", "imdb.votes"):
        session.toggle_field(field)
    session.assign_axis("y", "runtime")
    print(session.preview(limit=5).to_string())
    display_build(session)

    session.change_chart_kind("stacked-bar")
    display_build(session)

    if session.spec is not None:
        path = PlotlyRenderer().write_html(session.spec, theme="light")
        print(f"📁 Chart written to {path}")


# Example usage
if __name__ == "__main__":
    asyncio.run(main())
