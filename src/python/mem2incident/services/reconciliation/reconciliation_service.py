import logging
import threading
from time import time
from injector import inject, singleton
from prometheus_client import Counter, Gauge, Histogram
from memcached_cluster import CacheClusterView, CacheKeyNotFoundError, CacheTransportError
from mem2incident.clients.incidents import IncidentsApiClient
from mem2incident.configs import Mem2IncidentConfig
from mem2incident.exceptions import PayloadDecodeError
from mem2incident.models import CreateIncidentKey, DeliveryOutcome, DeliveryStatus, KeyOutcome, LinkIncidentKey, PassSummary
from mem2incident.services.incidents import PayloadNormalizerService
from mem2incident.services.keys import KeyClassifierService

KEYS_PROCESSED_COUNTER = Counter("m2i_keys_processed_total", "Total number of cache keys processed", ["outcome"])
KEYS_DISCOVERED_GAUGE = Gauge("m2i_keys_discovered", "Number of cache keys discovered in the last pass")
PASS_DURATION_HISTOGRAM = Histogram("m2i_pass_duration_seconds", "Duration of reconciliation passes in seconds")
PASS_ERROR_COUNTER = Counter("m2i_pass_error_total", "Total number of reconciliation passes that failed unexpectedly")

@singleton
class ReconciliationService:
    """
    Drains incident keys from memcached into the incidents API.

    Each pass discovers every key in the cluster, handles the keys that
    follow the incident naming conventions one at a time, and deletes a
    key only after the API accepted it. A failure on one key is logged
    and leaves the key for the next pass; nothing short of process
    termination or `stop()` ends the loop.
    """

    @inject
    def __init__(self,
                 config: Mem2IncidentConfig,
                 cluster_view: CacheClusterView,
                 key_classifier_service: KeyClassifierService,
                 payload_normalizer_service: PayloadNormalizerService,
                 incidents_api_client: IncidentsApiClient):
        self.__logger = logging.getLogger(self.__class__.__name__)
        self.__config = config
        self.__cluster_view = cluster_view
        self.__key_classifier_service = key_classifier_service
        self.__payload_normalizer_service = payload_normalizer_service
        self.__incidents_api_client = incidents_api_client
        self.__stop_event = threading.Event()

    @property
    def is_stopping(self) -> bool:
        return self.__stop_event.is_set()

    def stop(self) -> None:
        """Finish the in-flight pass, then leave `run_forever`."""
        if not self.__stop_event.is_set():
            self.__logger.info("Stop requested, finishing current pass")
        self.__stop_event.set()

    def run_forever(self) -> None:
        self.__logger.info(f"Reconciliation loop started against {len(self.__config.memcached_servers)} memcached server(s)")
        while not self.__stop_event.is_set():
            try:
                self.run_pass()
            except Exception:
                PASS_ERROR_COUNTER.inc()
                self.__logger.exception("Reconciliation pass failed")

            if self.__stop_event.is_set():
                break
            self.__logger.info(f"Sleeping for {self.__config.loop_interval} seconds before next check...")
            if self.__stop_event.wait(self.__config.loop_interval):
                break
        self.__logger.info("Reconciliation loop stopped")

    def run_pass(self) -> PassSummary:
        start_time: float = time()
        summary = PassSummary()

        keys: set[str] = self.__cluster_view.discover_keys()
        summary.keys_discovered = len(keys)
        KEYS_DISCOVERED_GAUGE.set(len(keys))

        for key in keys:
            try:
                outcome: KeyOutcome = self.process_key(key)
            except Exception:
                self.__logger.exception(f"Unexpected error processing key {key}")
                outcome = KeyOutcome.ERROR
            summary.record(outcome)
            KEYS_PROCESSED_COUNTER.labels(outcome=outcome.value).inc()

        summary.duration_seconds = time() - start_time
        PASS_DURATION_HISTOGRAM.observe(summary.duration_seconds)
        delivered: int = summary.count(KeyOutcome.DELIVERED) + summary.count(KeyOutcome.DELETE_FAILED)
        self.__logger.info(
            f"Pass finished in {summary.duration_seconds:.2f}s: {summary.keys_discovered} key(s) discovered, "
            f"{delivered} delivered, {summary.count(KeyOutcome.UNMATCHED)} unmatched"
        )
        return summary

    def process_key(self, key: str) -> KeyOutcome:
        key_kind = self.__key_classifier_service.classify(key)
        if not isinstance(key_kind, (CreateIncidentKey, LinkIncidentKey)):
            return KeyOutcome.UNMATCHED

        # Fetch
        self.__logger.info(f"Getting key {key}")
        try:
            raw: bytes = self.__cluster_view.fetch(key)
        except CacheKeyNotFoundError as e:
            self.__logger.warning(f"Key {key} not found on any server: {e}")
            return KeyOutcome.NOT_FOUND
        except CacheTransportError as e:
            self.__logger.warning(f"Error getting key {key}: {e}")
            return KeyOutcome.FETCH_FAILED

        # Normalize & deliver
        token: str = self.__config.auth_token
        try:
            if isinstance(key_kind, CreateIncidentKey):
                record = self.__payload_normalizer_service.normalize_incident(raw, token)
                outcome: DeliveryOutcome = self.__incidents_api_client.create_incident(record)
                action = "creating incident"
            else:
                link_request = self.__payload_normalizer_service.build_link_request(key_kind.parent_uuid, raw, token)
                outcome = self.__incidents_api_client.link_incidents(link_request)
                action = "linking incident"
        except PayloadDecodeError as e:
            self.__logger.error(f"Error decoding key {key}, leaving it for inspection: {e}")
            return KeyOutcome.DECODE_ERROR

        if outcome.status == DeliveryStatus.REJECTED:
            self.__logger.error(f"Error {action} for key {key}: {outcome.reason}")
            return KeyOutcome.REJECTED
        if outcome.status == DeliveryStatus.TRANSPORT_ERROR:
            self.__logger.error(f"Error {action} for key {key}: {outcome.reason}")
            return KeyOutcome.TRANSPORT_ERROR

        # Delete only after the API accepted the payload
        try:
            self.__cluster_view.delete(key)
        except (CacheKeyNotFoundError, CacheTransportError) as e:
            self.__logger.warning(f"Error deleting key {key} after {action}, it may be delivered again: {e}")
            return KeyOutcome.DELETE_FAILED

        self.__logger.info(f"Successfully deleted key {key} after {action}")
        return KeyOutcome.DELIVERED
