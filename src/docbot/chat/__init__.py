"""
Retrieval-augmented documentation Q&A.

This package answers ``/chat`` questions from the project documentation:

- **query_guard.py**: Rejects questions containing URLs or blocked words.
- **embedding_client.py**: Embeds the question (OpenAI) with fixed-delay retries.
- **vector_retriever.py**: Nearest-neighbour lookup in the Pinecone index.
- **context_assembler.py**: Relevance filter and character-budget packing.
- **answer_generator.py**: Grounded completion with the canonical fallback answer.
- **qa_orchestrator.py**: Runs the pipeline and owns the status message lifecycle.
- **clients.py**: Lazily-built, process-wide provider clients.
"""
