"""Test helper utilities for job-hunt tests."""

from .fakes import ExplodingAdapter, FakeClock, FakeScraper, StaticAdapter, make_job

__all__ = ["StaticAdapter", "ExplodingAdapter", "FakeClock", "FakeScraper", "make_job"]
