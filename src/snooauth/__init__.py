"""snooauth -- Reddit OAuth2 credential acquisition and renewal.

A :class:`~snooauth.session.Session` owns an HTTP transport and an
:class:`~snooauth.auth.authenticator.Authenticator` that caches one bearer
credential, shares any in-flight token exchange between concurrent callers
and renews the credential when it expires.

Typical usage::

    session = (
        SessionBuilder()
        .app_secrets(AppSecrets(client_id="abc123", client_secret="xyz890"))
        .auth_flow(PasswordStrategy(username="example_bot", password="hunter2"))
        .user_agent("example-bot", "1.0.0", "example_bot")
        .build()
    )
    credential = await session.bearer_token()

Modules:
    app: Typer application and CLI entry point.
    models: Scopes, credentials and settings.
    session: Client assembly.
    config: XDG-aware client configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr formatting with Rich.
"""

__version__ = "0.1.0"
