"""CNI driver configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Driver settings loaded from environment variables."""

    # Metadata service
    metadata_address: str = "169.254.169.250"
    metadata_timeout: float = 5.0  # seconds per request
    metadata_wait_interval: float = 1.0  # seconds between readiness probes
    metadata_wait_attempts: int = 0  # 0 waits forever

    # On-disk layout
    cni_config_root: str = "/opt/cni-driver"
    cni_bin_dir: str = "/opt/cni-driver/bin"
    nsenter_path: str = "/usr/bin/nsenter"

    # node-exporter textfile collector output, empty disables it
    metrics_textfile: str = ""

    debug: bool = False

    class Config:
        env_prefix = "RANCHER_"


settings = Settings()
