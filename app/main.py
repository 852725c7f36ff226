import signal
import threading

from dotenv import load_dotenv

from infrastructure.logging import configure_logging, get_module_logger
from infrastructure.services.container import Container, build_container
from infrastructure.services.providers import get_settings

load_dotenv()

logger = get_module_logger()


def list_configs(settings):
    """List all configuration settings keys"""
    config_settings = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def start(container: Container, stop: threading.Event) -> threading.Thread:
    """Start workers, subscribe the consumer and pump the bus on a thread."""
    container.initialize_channels()
    container.workers.start()
    container.consumer.initialize()

    bus_thread = threading.Thread(
        target=container.bus.run,
        args=(stop,),
        name="event-bus",
        daemon=True,
    )
    bus_thread.start()
    logger.info("application_started", health=container.health())
    return bus_thread


def main():
    """Main function to start the application."""
    settings = get_settings()
    configure_logging(log_level=settings.LOG_LEVEL, is_production=settings.is_production)
    logger.info("application_startup", git_sha=settings.GIT_SHA)
    list_configs(settings)

    container = build_container(settings)
    stop = threading.Event()

    def _request_stop(signum, _frame):
        logger.info("shutdown_requested", signal=signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    bus_thread = start(container, stop)
    stop.wait()
    bus_thread.join(timeout=5)
    container.shutdown()


if __name__ == "__main__":
    main()
