"""Pure record transformation: levels, models, rewriting and encoding."""
