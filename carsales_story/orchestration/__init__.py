"""
Orchestration Layer - Workflow Coordination

This layer coordinates the story workflow.
- Scene state (SceneController)
- No business logic
- Composes extract, transform, render and load operations
"""
