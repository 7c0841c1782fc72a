"""
Integration tests for Research Loop.

Test components together or against real external services:
- Research service API (FastAPI TestClient, mocked LLM)
- Loop client against the in-process service (httpx ASGI transport)
- Ollama client (real calls, marked with @pytest.mark.integration)
"""
