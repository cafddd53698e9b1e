"""External service adapters: vector store, embeddings, reranker."""
