"""Application configuration. All env vars defined here with defaults."""

from pydantic_settings import BaseSettings


class FlowNodesConfig(BaseSettings):
    # ── App ──
    log_level: str = "INFO"

    # ── Registry ──
    autoload_builtin_nodes: bool = True          # register core/events nodes on first use

    # ── Webhook node ──
    webhook_timeout_ms: int = 10000              # used when node.data.timeoutMs is absent
    webhook_user_agent: str = "flownodes-webhook"
    webhook_verify_ssl: bool = True

    model_config = {"env_prefix": "FLOWNODES_", "env_file": ".env", "extra": "ignore"}


config = FlowNodesConfig()
