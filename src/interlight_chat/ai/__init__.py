"""Integração com o oráculo (OpenAI), prompts, parsing e manual técnico."""
