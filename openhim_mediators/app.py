from flask import Flask
import click
import logging
from logging import config as logging_config
import os
import requests

from openhim_mediators.api.views import base_blueprint
from openhim_mediators.audit import audit_entry, audit_log_init


def create_app(testing=False):
    """Application factory, used to create application
    """
    app = Flask('openhim_mediators')
    app.config.from_object('openhim_mediators.config')
    app.config['TESTING'] = testing

    configure_logging(app)
    register_blueprints(app)
    register_commands(app)

    return app


def configure_logging(app):
    app.logger  # must call to initialize prior to config or it'll replace

    config = 'logging.ini'
    if not os.path.exists(config):
        # look above the testing dir when testing or debugging locally
        config = os.path.join('..', config)

    logging_config.fileConfig(config, disable_existing_loggers=False)
    app.logger.setLevel(getattr(logging, app.config['LOG_LEVEL'].upper()))
    app.logger.debug(
        "openhim mediators logging initialized",
        extra={'tags': ['testing', 'logging', 'app']})

    if not app.config['LOGSERVER_URL']:
        return

    audit_log_init(app)
    audit_entry(
        "openhim mediators logging initialized",
        extra={'tags': ['testing', 'logging', 'events'],
            'version': app.config['VERSION_STRING']})


def register_blueprints(app):
    """register all blueprints for application
    """
    app.register_blueprint(base_blueprint)


def register_commands(app):
    """register flask cli commands, i.e. ``flask register-mediators``
    """

    @app.cli.command("register-mediators")
    def register_mediators_command():
        """Authenticate with OpenHIM, register mediators and install channels"""
        from openhim_mediators.openhim import OpenHIMClient
        from openhim_mediators.registration import register_mediators

        report = register_mediators(OpenHIMClient.from_config(app.config))
        if report.auth_error:
            click.echo(f"authentication failed: {report.auth_error}", err=True)
        for urn in report.registered:
            click.echo(f"registered {urn}")
        for urn in report.installed:
            click.echo(f"installed channel for {urn}")
        for urn, step, message in report.failures:
            click.echo(f"{step} failed for {urn}: {message}", err=True)
        if not report.ok:
            raise SystemExit(1)

    @app.cli.command("create-client")
    @click.argument("name")
    @click.password_option()
    def create_client_command(name, password):
        """Create OpenHIM client NAME with a salted sha512 password"""
        from openhim_mediators.credentials import create_client
        from openhim_mediators.openhim import OpenHIMError

        try:
            click.echo(create_client(name, password))
        except (OpenHIMError, requests.exceptions.RequestException) as error:
            raise click.ClickException(f"unable to create client {name}: {error}")

    @app.cli.command("cross-border-id")
    @click.argument("jurisdiction")
    def cross_border_id_command(jurisdiction):
        """Print a new cross-border identifier for JURISDICTION"""
        from openhim_mediators.identifiers import generate_cross_border_id

        try:
            click.echo(generate_cross_border_id(jurisdiction))
        except ValueError as error:
            raise click.BadParameter(str(error), param_hint="JURISDICTION")
