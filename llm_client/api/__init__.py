"""llm-client adapter package.

Architectural role:
- Defines the external interaction boundary (command line).
- Performs argument validation and log-sink setup.
- Delegates the request pipeline to the core layer.

Scope:
- No direct model invocation logic is implemented in this package.
"""
