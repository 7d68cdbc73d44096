"""stardust: organize GitHub stars into categories with a generative model.

The heart of the package is a resilient batch-execution engine (rate
limiting, exponential backoff, bounded concurrency, paced batches) and a
fault-tolerant parser for model responses.
"""

__version__ = "0.1.0"
