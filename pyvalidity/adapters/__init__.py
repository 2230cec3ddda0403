"""Error-state adapters shipped with validity.

Each module in this package implements
`pyvalidity.core.adapter.ErrorStateAdapter` for one kind of presentation.
"""
from .markup import MarkupAdapter
from .recording import RecordingAdapter
