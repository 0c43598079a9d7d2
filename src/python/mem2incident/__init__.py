"""Moves incidents from memcached into the incidents REST API."""

__version__ = "1.0.0"
