"""
Basic usage example for the goal agent.

Set GOAL_AGENT_MOCK_MODE=1 to run offline with canned responses, or provide
OPENAI_API_KEY (and optionally SERP_API_KEY) for a live run.
"""

import logging
import sys

from goal_agent import AgentController, ModelSettings, create_agent_service


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    goal = " ".join(sys.argv[1:]) or "Plan a three-day trip to Kyoto in autumn."
    settings = ModelSettings(custom_max_loops=5, custom_language="English")
    controller = AgentController(
        create_agent_service(),
        settings,
        on_message=lambda message: print(f"[{message.type.value}] {message.value}"),
    )
    try:
        result = controller.run(goal)
    except KeyboardInterrupt:
        controller.stop()
        raise
    if result.failure is not None:
        print("Run failed:", result.failure.message)
    print("Completed tasks:")
    for outcome in result.outcomes:
        print(f"- {outcome.task}")


if __name__ == "__main__":
    main()
