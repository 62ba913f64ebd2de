"""llm-client: send a prompt to a configurable LLM HTTP provider.

Package layout:
    - `api`: command-line adapter.
    - `core`: orchestration pipeline, data contracts and error taxonomy.
    - `llm`: provider registry, payload construction, transport and extraction.
"""

__version__ = "0.1.0"
