"""spectest -- Generate pytest contract-test scaffolding from OpenAPI 3.0/3.1 specs.

This package reads an OpenAPI document, selects operations by path or tag, and
writes a pytest module containing one test method per operation and declared
response status code. Example values from the document are substituted into
path parameters and JSON request bodies, so engineers only have to extend the
generated assertions.

Typical workflow::

    spectest init --openapi-path openapi.yaml      # write ./spectest.json
    spectest make UserApi /users/{id} GET:/users   # write tests/feature/test_user_api.py

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
