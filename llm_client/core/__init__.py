"""Core orchestration package.

Architectural role:
    Exposes the request pipeline that sits between the CLI entrypoint and the
    LLM access layer (registry, payload builder, transport, extraction).

Composition:
    - `engine`: Main control-flow implementation for one invocation.
    - `types`: Immutable records passed between pipeline stages.
    - `errors`: Fatal error taxonomy.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Runtime side effects
    are performed by `engine` during request processing.
"""
