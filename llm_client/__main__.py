import sys

from llm_client.api.cli import main


if __name__ == "__main__":
    sys.exit(main())
