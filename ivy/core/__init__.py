"""
Core domain logic: session memory, compaction, retrieval and prompts.

Modules here depend only on ivy.models and the capability interfaces in
ivy.core.interfaces; concrete providers are injected.
"""
