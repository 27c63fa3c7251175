"""
Basic usage example for the Yopmail client.

Lists the newest mails of a mailbox, prints the first one and the
alternate domains the same mailbox is reachable on.
"""

from yopmail.config import _load_env, _init_client
from yopmail.exceptions import RateLimitError, YopmailError
from yopmail.logging import logger, setup_logging


def main():
    """Example: read the newest mail of test@yopmail.com."""
    cfg = _load_env()

    setup_logging(
        log_level=cfg["LOG_LEVEL"],
        log_file=cfg["LOG_FILE"],
    )

    try:
        with _init_client(cfg, "test@yopmail.com") as client:
            mail_ids = client.get_mail_ids(page=1)
            logger.info(f"Found {len(mail_ids)} mails")

            if mail_ids:
                message = client.get_mail_body(mail_ids[0], show_images=False)
                print(f"--- {message.mail_id} ---")
                print(message)

            domains = client.get_alternative_domains()
            print("Also reachable as:", ", ".join(f"{client.username}@{d}" for d in domains[:5]))

    except RateLimitError as e:
        logger.error(f"Throttled by the service, retry later or set YOPMAIL_PROXY: {e}")
        raise
    except YopmailError as e:
        logger.exception(f"Example failed: {e}")
        raise


if __name__ == "__main__":
    main()
