"""
Snapcards: flashcards from your notes, organized and studied locally.

Components:
- collection: the card/folder state engine (intents, reducer, store)
- study: shuffled study sessions over the collection
- storage: key-value persistence with schema migration
- generation: image/text -> cards via Gemini
- cli: typer/rich command-line interface
"""

__version__ = "1.0.0"
