"""
Unit tests for Research Loop.

Test individual components in isolation:
- Retry policy, backoff, classifier and engine
- Loop controller (mocked backend)
- HTTP backend and Ollama client (httpx.MockTransport)
- Prompt builder and research generator
- Export, configuration and CLI
"""
