"""Filter selection engine and exploration search."""
from .explore import Explorer, monthly_buckets, rank_suggestions, restrict_to_bucket, search
from .selection import FilterEngine, apply_filters, prune_categories, reachable_categories
