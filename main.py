# =============================================================================
# main.py - Interactive console for the financial research agent
# =============================================================================
#
# HOW TO RUN:
#   financialdatasets-agent          (console script)
#   python main.py                   (from the project root)
#
# WHAT HAPPENS:
#   1. Loads .env and checks FINANCIAL_DATASETS_API_KEY (exits if missing)
#   2. Creates the Google ADK agent (agent/research_agent.py), which starts
#      the MCP server as a subprocess
#   3. Reads questions from the terminal and streams the agent's events,
#      printing each tool call and the final answer
#
# The LLM key (OPENROUTER_API_KEY by default) is read by LiteLlm from the
# environment.
# =============================================================================

import asyncio
import sys

from core.config import load_settings
from core.models import Err

APP_NAME = "financial_research"
USER_ID = "console_user"


async def run_agent(api_key: str) -> None:
    """Run the research agent interactively until the user quits."""
    from google.adk.runners import Runner
    from google.adk.sessions import InMemorySessionService
    from google.genai import types

    from agent.research_agent import create_agent

    print("=" * 70)
    print("  FINANCIAL RESEARCH AGENT")
    print("  Google ADK + LiteLlm + Financial Datasets MCP")
    print("=" * 70)
    print("\nInitializing agent...")
    agent = create_agent(api_key)

    session_service = InMemorySessionService()
    runner = Runner(agent=agent, app_name=APP_NAME, session_service=session_service)
    session = await session_service.create_session(app_name=APP_NAME, user_id=USER_ID)

    print("Agent ready. Ask about a company (type 'quit' to exit).")
    print("-" * 70)

    while True:
        try:
            user_input = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if user_input.lower() in ("quit", "exit", "q"):
            print("\nGoodbye!")
            break
        if not user_input:
            continue

        message = types.Content(role="user", parts=[types.Part(text=user_input)])
        final_response = ""

        async for event in runner.run_async(
            user_id=USER_ID,
            session_id=session.id,
            new_message=message,
        ):
            if not (event.content and event.content.parts):
                continue
            for part in event.content.parts:
                if getattr(part, "function_call", None):
                    print(f"  [tool] {part.function_call.name}({dict(part.function_call.args or {})})")
                if getattr(part, "text", None):
                    final_response = part.text

        print("-" * 70)
        if final_response:
            print(f"\nAgent:\n\n{final_response}")
        else:
            print("\nNo response generated. The agent may have encountered an error.")


def cli() -> None:
    settings = load_settings()
    if isinstance(settings, Err):
        print(f"Error: {settings.message}", file=sys.stderr)
        sys.exit(1)
    asyncio.run(run_agent(settings.value.api_key))


if __name__ == "__main__":
    cli()
