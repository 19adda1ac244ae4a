import asyncio
import sys

from dotenv import load_dotenv

from wikipedia_mcp import (
    ResponseSequencer,
    SequencerSession,
    StdioSequencerDriver,
    default_steps,
    render_report,
    setup_logging,
)

# Load environment variables
load_dotenv()


async def main() -> None:
    """
    Spawn the Wikipedia MCP server and walk the example call chain against it.
    """
    title = sys.argv[1] if len(sys.argv) > 1 else "Albert Einstein"
    print(f"Running the example chain for '{title}'...")

    driver = StdioSequencerDriver(sys.executable, ["-m", "wikipedia_mcp", "serve"], reply_timeout=60.0)
    sequencer = ResponseSequencer(SequencerSession(), default_steps(title=title), max_retries=2)

    try:
        session = await driver.run(sequencer)
    except Exception as e:
        print(f"An error occurred: {e}")
        return

    print(render_report(session))


if __name__ == "__main__":
    setup_logging("WARNING")
    asyncio.run(main())
