"""Service layer - ledger operations and portfolio analytics."""

from app.services.ledger_service import LedgerService
from app.services.sector_allocator import SectorAllocator
from app.services.drift_detector import DriftDetector
from app.services.peer_clusterer import PeerClusterer
from app.services.recommendation_engine import RecommendationEngine
from app.services.reporting_service import ReportingService
from app.services.similarity import cosine_similarity

__all__ = [
    "LedgerService",
    "SectorAllocator",
    "DriftDetector",
    "PeerClusterer",
    "RecommendationEngine",
    "ReportingService",
    "cosine_similarity",
]
