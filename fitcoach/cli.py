# fitcoach/cli.py
import click

from domain.users.schemas import UserRole
from fitcoach.extensions import db
from fitcoach.models import User
from fitcoach.services.access import entitlement_resolver


def register_cli(app):
    @app.cli.command("create-user")
    @click.option("--email", required=True)
    @click.option("--name", required=True)
    @click.option("--role", type=click.Choice([r.value for r in UserRole]), default=UserRole.client.value)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user_cmd(email, name, role, password):
        """Create a user account unless the email is already taken."""
        if User.query.filter_by(email=email).first():
            click.echo(f"User with email '{email}' already exists.")
            return
        user = User(email=email, name=name, role=role, is_active=True)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"{role.capitalize()} created: id={user.id} email={email}")

    @app.cli.command("entitlement")
    @click.argument("user_id", type=int)
    def entitlement_cmd(user_id):
        """Print the package currently entitling USER_ID."""
        now = app.config["CLOCK"].now()
        entitlement = entitlement_resolver().resolve_or_none(user_id, now)
        if entitlement is None:
            click.echo(f"User {user_id} has no active package.")
            return
        click.echo(
            f"User {user_id}: {entitlement.package.name} [{entitlement.status.value}] "
            f"expires {entitlement.expires_at.isoformat()} ({entitlement.remaining_days} days left)"
        )
