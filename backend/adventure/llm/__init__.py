"""LLM integration components.

- `client.py`: LiteLLM client wrapper and provider configuration
- `prompt_loader.py`: Prompt template loading utility
- `session_logger.py`: Per-session interaction logs
- `narrator.py`: Scene generation with fallback narrative
"""
