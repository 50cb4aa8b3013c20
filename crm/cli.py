"""CLI tools for CRM administration."""

import click

from .errors import CRMError


def register_commands(app):
    """Attach the admin commands to ``flask`` for this app"""

    @app.cli.command("create-admin")
    @click.option("--email", required=True, help="Administrator email address")
    @click.option("--name", required=True, help="Display name")
    @click.password_option(help="Initial password")
    def create_admin(email, name, password):
        """
        Create the first administrator account.

        Example:
            flask --app run create-admin --email owner@example.com --name Owner
        """
        from .services.user_service import bootstrap_admin

        try:
            user = bootstrap_admin(email, password, name)
        except CRMError as e:
            raise click.ClickException(str(e))
        click.echo(f"Administrator {user['email']} created")
