"""LLM access package.

Architectural role:
    Provides provider configuration, request-payload construction, transport
    and response extraction used by the orchestration layer to invoke
    text-generation backends.

Module split:
    - `provider_config`: mode registry and configuration-file loading.
    - `service`: prompt-to-payload adapter per request dialect.
    - `client`: HTTP transport and outcome classification.
    - `extractor`: field-path extraction from JSON response bodies.
"""
