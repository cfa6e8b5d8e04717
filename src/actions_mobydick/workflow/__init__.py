"""Workflow template loading."""

from actions_mobydick.workflow.file import WorkflowFile, load_workflow_file, render_workflow

__all__ = [
    "WorkflowFile",
    "load_workflow_file",
    "render_workflow",
]
