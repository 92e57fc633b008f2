"""
Flask CLI commands.

    flask --app storefront.app init-db
    flask --app storefront.app create-admin owner@shop.com
"""
import click
from flask import Flask, current_app

from storefront.core.exceptions import BaseAPIException
from storefront.db import init_db


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Create the database tables."""
        init_db(current_app.extensions["db_engine"])
        click.echo("Database tables created.")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin_command(email: str, password: str):
        """Create an admin account."""
        try:
            admin = current_app.extensions["auth_service"].create_admin(email, password)
        except BaseAPIException as e:
            raise click.ClickException(e.message)
        click.echo(f"Created admin {admin.id} <{admin.email}>")
