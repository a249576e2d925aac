import argparse
import logging
import sys
from pathlib import Path
from engine import convert_xml
from errors import ConversionError
from config import get_config

cfg = get_config()

def main(argv=None):
    ap = argparse.ArgumentParser(description="Convert an ISO 20022 FIToFICstmrCdtTrf message to MT103 block 4.")
    ap.add_argument("xmlpath", nargs="?", help="pacs.008 XML file to convert")
    ap.add_argument("--serve", action="store_true", help="run the HTTP API instead")
    args = ap.parse_args(argv)

    logging.basicConfig(level=cfg.logging.level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.serve:
        import uvicorn
        from api import app
        logging.info("Server running at http://localhost:%s", cfg.api.port)
        uvicorn.run(app, host=cfg.api.host, port=cfg.api.port, log_level="debug" if cfg.api.debug else cfg.logging.level.lower())
        return 0
    if not args.xmlpath:
        ap.error("an XML file is required unless --serve is given")

    #Reads xml from path
    xmlbytes = Path(args.xmlpath).read_bytes()
    try:
        mt103 = convert_xml(xmlbytes)
    except ConversionError as e:
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return 1
    print(mt103)
    return 0

if __name__ == "__main__":
    sys.exit(main())
