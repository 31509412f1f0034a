"""External service adapters: WeChat OAuth and SMS providers."""
