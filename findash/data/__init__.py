"""Source loading, normalization, merge, and the in-memory transaction store."""
from .loader import default_sources, load_all_sources, load_source
from .merge import merge_sources
from .normalize import CsvRecordNormalizer, RecordNormalizer, SpreadsheetRecordNormalizer
from .schemas import FilterSelection, SourceSpec, Transaction, transactions_to_frame
from .store import DataStore
