#!/usr/bin/env python3
"""
kubeplan - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Configures logging and Kubernetes credentials
3. Builds the shared reconciler context
4. Runs the kopf operator

All reconciliation logic is in the modules, following black box principles.
"""

import logging
import sys
from dataclasses import replace
from typing import Optional, Tuple

import click
import kopf
from dotenv import load_dotenv
from kubernetes import client, config as kube_config
from kubernetes.config.config_exception import ConfigException

from kubeplan.config.provider import ConfigProvider, ControllerConfig, EnvConfigProvider
from kubeplan.logging_config import setup_logging
from kubeplan.modules.crd import render_crd
from kubeplan.modules.executor import SubprocessRunner
from kubeplan.modules.reconciler import Context
from kubeplan.modules.storage import KubernetesStatusStore

# Registers the kopf handlers.
import kubeplan.modules.controller  # noqa: F401

logger = logging.getLogger(__name__)


def load_kubernetes_config(in_cluster: Optional[bool]) -> None:
    """
    Load Kubernetes client credentials.

    Args:
        in_cluster: True/False to force a source, None to try in-cluster first
    """
    if in_cluster is True:
        kube_config.load_incluster_config()
        logger.info("Loaded in-cluster configuration")
        return
    if in_cluster is None:
        try:
            kube_config.load_incluster_config()
            logger.info("Loaded in-cluster configuration")
            return
        except ConfigException:
            pass
    kube_config.load_kube_config()
    logger.info("Loaded kubeconfig from default location")


def build_context(controller_config: ControllerConfig, ctx_logger: logging.Logger) -> Context:
    """Build the shared context handed to every reconciliation cycle."""
    store = KubernetesStatusStore(client.CustomObjectsApi())
    return Context(
        config=controller_config,
        store=store,
        runner=SubprocessRunner(),
        logger=ctx_logger.getChild("reconciler"),
    )


def run_operator(ctx: Context) -> None:
    """Run kopf until stopped."""
    cfg = ctx.config
    kopf.run(
        clusterwide=cfg.clusterwide,
        namespaces=list(cfg.namespaces),
        liveness_endpoint=cfg.liveness_endpoint,
        memo=kopf.Memo(context=ctx),
        standalone=True,
    )


@click.group()
def cli():
    """Declarative command execution controller for Plan resources."""
    load_dotenv()


@cli.command()
@click.option("--namespace", "-n", "namespaces", multiple=True,
              help="Namespace to watch (repeatable, default: all namespaces)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging for kubeplan")
def run(namespaces: Tuple[str, ...], verbose: bool):
    """Watch Plan objects and execute their commands."""
    provider: ConfigProvider = EnvConfigProvider()

    logging_config = provider.get_logging_config()
    if verbose:
        logging_config = replace(
            logging_config, log_filter=f"{logging_config.log_filter},kubeplan=debug"
        )
    root_logger = setup_logging(logging_config)

    try:
        controller_config = provider.get_controller_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    if namespaces:
        controller_config = replace(controller_config, namespaces=namespaces)

    try:
        load_kubernetes_config(controller_config.in_cluster)
    except ConfigException as e:
        logger.error(f"Failed to load Kubernetes config: {e}")
        sys.exit(1)

    ctx = build_context(controller_config, root_logger)
    logger.info("Starting kubeplan controller")
    run_operator(ctx)


@cli.command()
def crdgen():
    """Print the Plan CustomResourceDefinition as YAML."""
    click.echo(render_crd(), nl=False)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
