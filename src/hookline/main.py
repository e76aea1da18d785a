#!/usr/bin/env python3
"""
Command line entry point for Hookline
Launches the web API or prepares the session table.
"""

import argparse
import logging
import os
import sys

from hookline.config import DEFAULT_CONFIG_PATH, get_config
from hookline.repositories import MySQLSessionStore, connection_factory_from_config


logger = logging.getLogger("hookline")


def main(argv=None) -> int:
   """Main function with argument parsing"""
   parser = argparse.ArgumentParser(
      description='Hookline - session and hook backend (uses config.yaml for defaults)',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
   Examples:
     hookline --api --config cfg/config.yaml
     hookline --init-database --config cfg/config.yaml

   Note: Most parameters are read from config.yaml by default.
      Use command-line arguments to override config values.
      """
   )
   parser.add_argument('--config',
                       default=DEFAULT_CONFIG_PATH,
                       help=f'Path to config file (default: {DEFAULT_CONFIG_PATH})')
   parser.add_argument('--init-database',
                       action="store_true",
                       help='Create the session table (mysql store backend only)')
   parser.add_argument('--api',
                       action="store_true",
                       help='Launch the web API server (FastAPI)')
   parser.add_argument('--host',
                       default='127.0.0.1',
                       help='API server host (default: 127.0.0.1)')
   parser.add_argument('--port',
                       type=int,
                       default=8000,
                       help='API server port (default: 8000)')
   parser.add_argument('--log-level',
                       default='info',
                       help='Log level (default: info)')

   args = parser.parse_args(argv)

   logging.basicConfig(
      level=args.log_level.upper(),
      format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
   )

   # create_app() reads the config path from the environment
   os.environ["HOOKLINE_CONFIG"] = args.config
   config = get_config(args.config)

   if args.init_database:
      if (config.get('store') or {}).get('backend') != 'mysql':
         parser.error("--init-database requires store.backend: mysql")

      store = MySQLSessionStore(
         connection_factory_from_config(config.get('database') or {}),
         table=(config.get('store') or {}).get('table', 'app_session')
      )
      try:
         store.create_table()
      except Exception as e:
         logger.error("Unable to create session table: %s", e)
         return 1
      logger.info("Session table '%s' is ready", store.table)

   if args.api:
      import uvicorn

      logger.info("Starting Hookline API server on http://%s:%s", args.host, args.port)
      logger.info("API Documentation: http://%s:%s/api/docs", args.host, args.port)

      uvicorn.run(
         "hookline.api.main:create_app",
         factory=True,
         host=args.host,
         port=args.port,
         reload=False,
         log_level=args.log_level.lower()
      )
      return 0

   if not args.init_database:
      parser.print_help()

   return 0


if __name__ == "__main__":
   sys.exit(main())
