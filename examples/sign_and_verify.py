"""
Basic usage example of the signing core.

This example feeds some observed randomness into the entropy pool, generates
a key pair, signs a document and verifies the wire payload a QR code would
carry.
"""

import logging
import sys
import time

import qrsign


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        # Timing jitter stands in for mouse movement samples
        qrsign.add_entropy(time.perf_counter_ns() & 0xFF for _ in range(200))

        pair = qrsign.generate_key_pair()
        logger.info("Generated key %s\n%s", pair.id, pair.public_key_pem)

        document = b"I owe the bearer one coffee."
        signed = qrsign.sign(pair.id, document, "iou.txt")
        qr_content = qrsign.encode_qr_envelope(signed)
        logger.info("QR content: %s", qr_content)

        # The verifier only has the document, the public key and the scanned string
        public_key = qrsign.import_public_key(pair.public_key_pem)
        payload = "|".join(qrsign.decode_qr_envelope(qr_content))
        logger.info("Original verifies: %s", qrsign.verify(public_key, document, payload))
        logger.info(
            "Edited copy verifies: %s",
            qrsign.verify(public_key, document.replace(b"one", b"ten"), payload),
        )
    except qrsign.QRSignError:
        logger.exception("Error")
        sys.exit(1)


if __name__ == "__main__":
    main()
