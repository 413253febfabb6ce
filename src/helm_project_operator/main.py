import kopf
import logging

from helm_project_operator.config import OperatorConfig
from helm_project_operator.crd.installer import create_crds
from helm_project_operator.k8s import create_api_client

config = OperatorConfig.from_env()

logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@kopf.on.startup()
def startup_fn(settings: kopf.OperatorSettings, **kwargs):
    """Install the CRDs the operator needs before any handler runs."""
    logger.info("Helm Project Operator is starting up...")

    api_client = create_api_client()

    if config.manage_crds:
        try:
            installed = create_crds(
                api_client,
                update_crds=config.update_crds,
                detect_runtime=config.detect_runtime,
            )
        except Exception as e:
            logger.error(f"Failed to apply CRDs to cluster: {e}")
            raise
        logger.info(f"CRDs are ready ({len(installed)} installed or updated)")
    else:
        logger.info("CRD management is disabled; assuming CRDs are installed")

    settings.batching.worker_limit = config.worker_limit
    settings.posting.enabled = config.posting_enabled

    logger.info(f"Worker limit: {settings.batching.worker_limit}")
    logger.info(f"Posting enabled: {settings.posting.enabled}")
    logger.info("Helm Project Operator startup complete")


@kopf.on.cleanup()
def cleanup_fn(**kwargs):
    """Cleanup operator resources."""
    logger.info("Helm Project Operator shutdown complete")


def main():
    try:
        kopf.run()
    except KeyboardInterrupt:
        logger.info("Operator stopped by user")
    except Exception as e:
        logger.error(f"Operator failed: {e}")
        raise


if __name__ == "__main__":
    main()
