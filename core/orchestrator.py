import asyncio
import httpx
import logging
from collections.abc import Callable
from config import DEFAULT_PREVIEW_LIMIT, LOAD_REQUEST_TYPE, NO_INPUT_MESSAGE, UNKNOWN_FORMAT_MESSAGE
from core.acquisition import DocumentReader
from core.aggregator import VisitAggregator
from core.clustering import StayClusterer
from core.detector import DataType, detect_data_type
from core.errors import NoInputFailure, UnknownFormatFailure
from core.extractors import EXTRACTORS
from enum import Enum

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    IDLE = 'idle'
    ACQUIRING = 'acquiring'
    PARSING = 'parsing'
    DETECTING = 'detecting'
    EXTRACTING = 'extracting'
    CLUSTERING = 'clustering'
    AGGREGATING = 'aggregating'
    PASSTHROUGH = 'passthrough'
    DONE = 'done'
    FAILED = 'failed'


class RequestOrchestrator:
    """Drive one load request from source to a single terminal message"""

    def __init__(
        self,
        emit: Callable[[dict], None],
        http_client: httpx.AsyncClient | None = None,
        clusterer: StayClusterer | None = None,
    ):
        self.emit = emit
        self.http_client = http_client
        self.clusterer = clusterer or StayClusterer()
        self.state = JobState.IDLE

    def transition(self, state: JobState):
        if state is self.state:
            return
        logger.debug(f"Job state: {self.state.value} -> {state.value}")
        self.state = state

    def progress(self, message: str):
        self.emit({'type': 'progress', 'message': message})

    def extract(self, documents: list, data_type: DataType) -> list[dict]:
        """Run the extractor for the detected data type, clustering points where needed"""
        self.transition(JobState.EXTRACTING)
        self.progress("Extracting visits...")
        extractor_class = EXTRACTORS[data_type]
        if extractor_class.clusters_points:
            extractor = extractor_class(clusterer=self.clusterer)
        else:
            extractor = extractor_class()
        records = extractor.extract(documents)

        if not extractor.clusters_points:
            return records

        self.transition(JobState.CLUSTERING)
        self.progress("Clustering stays...")
        return extractor.cluster(records)

    async def process(self, source: dict | None, options: dict) -> dict:
        """Produce the 'done' payload, raising LocationHistoryError on fatal input problems"""
        self.transition(JobState.ACQUIRING)
        reader = DocumentReader(
            http_client=self.http_client,
            progress=self.progress,
            on_read=lambda: self.transition(JobState.ACQUIRING),
            on_parse=lambda: self.transition(JobState.PARSING),
        )
        documents = await reader.read(source)
        if not documents:
            raise NoInputFailure(NO_INPUT_MESSAGE)

        self.transition(JobState.DETECTING)
        data_type = detect_data_type(documents[0])
        if data_type is DataType.UNKNOWN:
            raise UnknownFormatFailure(UNKNOWN_FORMAT_MESSAGE)
        logger.info(f"Detected {data_type.value} across {len(documents)} document(s)")

        visits = self.extract(documents, data_type)
        visits_count = len(visits)

        if options.get('includeVisits'):
            self.transition(JobState.PASSTHROUGH)
            return {'dataType': data_type.value, 'visitsCount': visits_count, 'visits': visits}

        self.transition(JobState.AGGREGATING)
        self.progress("Aggregating...")
        preview_limit = options.get('previewLimit')
        if preview_limit is None:
            preview_limit = DEFAULT_PREVIEW_LIMIT
        agg = VisitAggregator(options.get('geoCache')).aggregate(visits)

        return {
            'dataType': data_type.value,
            'visitsCount': visits_count,
            'visitsPreview': visits[:preview_limit],
            'agg': agg,
        }

    async def handle(self, request: dict | None) -> dict | None:
        """
        Handle one request message

        Emits zero or more progress messages followed by exactly one 'done' or 'error'
        message. Requests whose type is not the load tag are ignored.

        Returns:
            dict | None: the terminal message, None for ignored requests
        """
        if not isinstance(request, dict) or request.get('type') != LOAD_REQUEST_TYPE:
            logger.debug(f"Ignoring request: {request!r:.80}")
            return None

        options = request.get('options') or {}
        try:
            data = await self.process(request.get('source'), options)
        except Exception as e:
            self.transition(JobState.FAILED)
            logger.error(f"Load request failed: {e}")
            message = {'type': 'error', 'error': str(e) or type(e).__name__}
        else:
            self.transition(JobState.DONE)
            logger.info(f"Load request done: {data['visitsCount']} visits ({data['dataType']})")
            message = {'type': 'done', 'data': data}

        self.emit(message)
        return message


def run_request(request: dict, http_client: httpx.AsyncClient | None = None, clusterer: StayClusterer | None = None) -> list[dict]:
    """Process a request synchronously and return every message it emitted, in order"""
    messages = []
    orchestrator = RequestOrchestrator(messages.append, http_client=http_client, clusterer=clusterer)
    asyncio.run(orchestrator.handle(request))
    return messages
