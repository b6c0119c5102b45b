"""Workflow orchestration for coordinating ingestion, classification, and dispatch."""

from .service import LeadWorkflow

__all__ = ["LeadWorkflow"]
