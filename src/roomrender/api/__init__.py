"""RoomRender: FastAPI REST API layer.

Modules
-------
main
    FastAPI application with the regeneration route, the static gallery
    mount, and the ``main()`` CLI entry point.
models
    Pydantic response models used for OpenAPI documentation.
"""
