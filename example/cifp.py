#!/usr/bin/env python3

import argparse
import logging
from pathlib import Path
from pprint import pprint

from cifp_reader.models.cifp_model import CifpModel
from cifp_reader.models.persistence import PersistenceManager
from cifp_reader.models.validation import CifpError
from cifp_reader.sources import CifpSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Command:
    """Command-line interface for cifp_reader."""

    def __init__(self, args):
        self.args = args
        self.cache_dir = Path(args.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.source = CifpSource(cache_dir=str(self.cache_dir), source_file=args.file)
        if args.force_refresh:
            self.source.set_force_refresh()
        if args.never_refresh:
            self.source.set_never_refresh()

    def load(self) -> CifpModel:
        model = CifpModel()
        self.source.update_model(model)
        report = self.source.last_report
        if report is not None and not report.is_valid:
            logger.warning(f'{len(report.errors)} groups were skipped')
            if self.args.verbose:
                for message in report.get_error_messages():
                    logger.warning(message)
        return model

    def run_stats(self):
        """Load the data and print entity counts."""
        pprint(self.load().get_statistics())

    def run_procedure(self):
        """Print the legs of the procedures named on the command line."""
        model = self.load()
        for name in self.args.names:
            procedures = model.get_procedures(name.upper(), self.args.airport)
            if not procedures:
                logger.warning(f'No procedure named {name}')
                continue
            for procedure in procedures:
                print(f'{procedure} transitions: {", ".join(procedure.transitions) or "none"}')
                try:
                    route = procedure.select_route(self.args.inbound, self.args.outbound)
                except CifpError as e:
                    logger.error(f'Cannot select route for {procedure}: {e}')
                    continue
                for instruction in route:
                    print(f'  {instruction}')

    def run_export(self):
        """Export one entity kind to CSV."""
        model = self.load()
        output = Path(self.args.output or f'{self.args.kind}.csv')
        df = model.to_dataframe(self.args.kind)
        df.to_csv(output, index=False)
        logger.info(f'Wrote {len(df)} {self.args.kind} to {output}')

    def run_save(self):
        """Save the parsed model as JSON."""
        model = self.load()
        PersistenceManager.save_model(model, self.args.output or 'cifp')

    def run(self):
        getattr(self, f'run_{self.args.command}')()


def main():
    parser = argparse.ArgumentParser(description='FAA CIFP data tool')
    parser.add_argument('command', help='Command to execute', choices=['stats', 'procedure', 'export', 'save'])
    parser.add_argument('names', help='Procedure names for the procedure command', nargs='*')
    parser.add_argument('-c', '--cache-dir', help='Directory to cache files', default='cache')
    parser.add_argument('--file', help='Local CIFP archive or FAACIFP18 file to read instead of downloading')
    parser.add_argument('-a', '--airport', help='Restrict procedures to one airport')
    parser.add_argument('--inbound', help='Inbound transition (runway for SIDs)')
    parser.add_argument('--outbound', help='Outbound transition (runway for STARs)')
    parser.add_argument('-k', '--kind', help='Entity kind to export', choices=['navaids', 'aerodromes', 'runways', 'fixes'],
                        default='aerodromes')
    parser.add_argument('-o', '--output', help='Output file or directory')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    parser.add_argument('-f', '--force-refresh', help='Force refresh of cached data', action='store_true')
    parser.add_argument('-n', '--never-refresh', help='Never refresh cached data if it exists', action='store_true')

    args = parser.parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    command = Command(args)
    command.run()


if __name__ == '__main__':
    main()
