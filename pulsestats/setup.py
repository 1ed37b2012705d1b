"""
Setup functions for the quantity service
"""

import logging
from typing import List, Optional, Tuple, Union

from .bridge import QuantityBridge
from .service import QuantityService
from .store import HealthStoreProtocol
from .utils import Config


def setup_quantity_service(
        yaml_files: Optional[Union[str, List[str]]] = None,
        store: Optional[HealthStoreProtocol] = None,
        env: Optional[str] = None,
) -> Tuple[QuantityService, QuantityBridge]:
    """
    Load configuration, initialize logging and wire a service and bridge together

    Args:
        yaml_files: YAML configuration file(s); config.yaml in the working directory is always tried
        store: Health store implementation (default: InMemoryHealthStore)
        env: Environment name selecting config.<env>.yaml variants (default: $ENV)

    Returns:
        (service, bridge)
    """
    config = Config.init(yaml_filenames=yaml_files, env=env)

    service = QuantityService(store)
    bridge = QuantityBridge(service, config)

    logging.info(
        f"Quantity service ready: store={type(service.store).__name__}, "
        f"timezone={config.query.timezone.zone}, default interval={config.query.default_interval}"
    )
    return service, bridge
