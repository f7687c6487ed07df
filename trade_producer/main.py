"""
Main entry point for the synthetic trade producer
"""
import logging
import os
import signal
import sys
import threading
from typing import Optional

from .config import LogConfig, ProducerConfig
from .errors import AdminError, PublishError
from .producer import BatchProducer


class StatsReporter(threading.Thread):
    """Background thread that logs the producer status line at a fixed interval"""

    def __init__(self, producer: BatchProducer, stop_event: threading.Event, interval: float = 1.0):
        super().__init__(name="stats-reporter", daemon=True)
        self.logger = logging.getLogger(self.__class__.__name__)
        self.producer = producer
        self.stop_event = stop_event
        self.interval = interval

    def run(self) -> None:
        while not self.stop_event.wait(self.interval):
            self.logger.info(self.producer.report())


class TradeProducerApplication:
    """Main application orchestrator"""

    def __init__(
            self,
            producer_config: ProducerConfig,
            report_interval: float = 1.0,
            create_topic: bool = False,
            producer: Optional[BatchProducer] = None
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.producer_config = producer_config
        self.report_interval = report_interval
        self.create_topic = create_topic
        self.producer = producer if producer is not None else BatchProducer(producer_config)
        self.cancel_event = threading.Event()

    def setup_topic(self) -> None:
        """Create topic, continuing if the broker rejects the request"""
        try:
            self.producer.create_topic()
        except AdminError as e:
            self.logger.warning(f"Topic setup skipped: {e}")

    def stop(self) -> None:
        """Request a graceful stop at the next tick boundary"""
        self.cancel_event.set()

    def run(self) -> int:
        """Run the producer until stopped; return the process exit code"""
        if self.create_topic:
            self.setup_topic()

        reporter_stop = threading.Event()
        reporter = StatsReporter(self.producer, reporter_stop, self.report_interval)
        reporter.start()

        try:
            self.producer.run(self.cancel_event)
            return 0
        except PublishError as e:
            self.logger.error(f"Producer failed: {e}")
            return 1
        finally:
            reporter_stop.set()
            reporter.join()
            self.logger.info("=" * 80)
            self.logger.info(f"FINAL: {self.producer.report()}")
            self.logger.info("=" * 80)


def main():
    """Main entry point"""
    # Setup logging
    LogConfig.setup_logging()

    # Configuration
    producer_config = ProducerConfig.from_env()

    app = TradeProducerApplication(
        producer_config=producer_config,
        report_interval=float(os.environ.get('REPORT_INTERVAL', '1')),
        create_topic=os.environ.get('CREATE_TOPIC', '0') == '1',
    )

    # Handle graceful shutdown
    def signal_handler(sig, frame):
        logging.info("Interrupted! Shutting down...")
        app.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    sys.exit(app.run())


if __name__ == "__main__":
    main()
