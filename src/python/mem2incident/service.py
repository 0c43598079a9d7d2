import logging
import signal
from typing import Optional
from injector import Injector
from prometheus_client import start_http_server
from memcached_cluster import CacheClusterView
from mem2incident.clients.incidents import IncidentsApiClient
from mem2incident.configs import Mem2IncidentConfig
from mem2incident.services.reconciliation import ReconciliationService

LOG_FORMAT = '%(asctime)s %(levelname)s: [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler()],
        force=True
    )

def build_injector(config: Mem2IncidentConfig,
                   cluster_view: Optional[CacheClusterView] = None,
                   incidents_api_client: Optional[IncidentsApiClient] = None) -> Injector:
    """
    Build the process-wide context: the configuration and the two I/O
    clients are bound as instances, every service is resolved from them.
    """
    cluster_view = cluster_view or CacheClusterView.from_addresses(
        config.memcached_servers,
        connect_timeout=config.cache_connect_timeout,
        timeout=config.cache_timeout,
        discovery_workers=config.discovery_workers,
    )
    incidents_api_client = incidents_api_client or IncidentsApiClient.from_config(config)

    def configure_bindings(binder):
        binder.bind(Mem2IncidentConfig, to=config)
        binder.bind(CacheClusterView, to=cluster_view)
        binder.bind(IncidentsApiClient, to=incidents_api_client)

    return Injector([configure_bindings])

def run_service(config: Mem2IncidentConfig) -> None:
    logger = logging.getLogger("mem2incident")

    ################################
    # Initialize Prometheus Client #
    ################################

    if config.metrics_port is not None:
        start_http_server(config.metrics_port)
        logger.info(f"Prometheus metrics exposed on port {config.metrics_port}")

    ##################################
    # Initialize Dependency Injector #
    ##################################

    injector: Injector = build_injector(config)
    reconciliation_service: ReconciliationService = injector.get(ReconciliationService)

    #############################
    # Graceful Shutdown Handler #
    #############################

    def shutdown_handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}")
        reconciliation_service.stop()

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    ################
    # Start Loop   #
    ################

    try:
        reconciliation_service.run_forever()
    finally:
        injector.get(CacheClusterView).close()
        injector.get(IncidentsApiClient).close()
