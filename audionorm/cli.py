"""Click CLI for audionorm: peak/LUFS measurement and normalization."""

import sys
from pathlib import Path

import click

from audionorm import __version__
from audionorm.exceptions import AudioNormError
from audionorm.log import get_logger, level_from_flags, setup_logging
from audionorm.models import DEFAULT_BLOCK_SIZE, DEFAULT_PEAK_DB, FadeCurve

logger = get_logger('cli')

EXAMPLES = """\b
Examples:
  audionorm -m -12 input.wav output.wav
  audionorm -l -23 input.wav output.wav
  audionorm -m -6 -v input.flac output.flac
  audionorm --peak input.mp3
  audionorm --measure-lufs input.wav

Supported formats: WAV, FLAC, OGG, AU, AIFF, MP3 and others supported by libsndfile.
"""


class NormalizerCommand(click.Command):
    """Command whose usage errors exit with status 1."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _fail_with_usage(ctx, message):
    click.echo(f"Error: {message}", err=True)
    click.echo(ctx.get_help(), err=True)
    ctx.exit(1)


@click.command(
    cls=NormalizerCommand,
    context_settings={'help_option_names': ['-h', '--help']},
    epilog=EXAMPLES,
)
@click.argument('input_file', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.argument('output_file', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--max-peak', '-m', default=DEFAULT_PEAK_DB, type=float, show_default=True,
              help='Target peak level in dB for peak normalization.')
@click.option('--lufs', '-l', 'target_lufs', default=None, type=float,
              help='Target LUFS level; selects loudness normalization (e.g. -23).')
@click.option('--peak', 'peak_only', is_flag=True,
              help='Only show the peak level of the input file (no normalization).')
@click.option('--measure-lufs', 'measure_lufs_only', is_flag=True,
              help='Only show the LUFS level of the input file (no normalization).')
@click.option('--fade-in', default=0.0, type=click.FloatRange(min=0.0), show_default=True,
              help='Fade-in duration in seconds.')
@click.option('--fade-out', default=0.0, type=click.FloatRange(min=0.0), show_default=True,
              help='Fade-out duration in seconds.')
@click.option('--fade-curve', default=FadeCurve.LINEAR.value, show_default=True,
              type=click.Choice([c.value for c in FadeCurve] + ['exp', 'log'], case_sensitive=False),
              help='Fade curve shape.')
@click.option('--block-size', default=DEFAULT_BLOCK_SIZE, type=click.IntRange(min=1), show_default=True,
              help='Frames per block for streamed measurement.')
@click.option('--log-file', default=None, type=click.Path(dir_okay=False),
              help='Also write log output to this file.')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging.')
@click.option('--quiet', '-q', is_flag=True, help='Only log errors.')
@click.version_option(__version__, '--version', prog_name='audionorm')
@click.pass_context
def cli(ctx, input_file, output_file, max_peak, target_lufs, peak_only, measure_lufs_only,
        fade_in, fade_out, fade_curve, block_size, log_file, verbose, quiet):
    """audionorm: audio peak and loudness (EBU R128) normalizer."""
    from audionorm.audio_normalizer import AudioNormalizer
    from audionorm.models import NormalizeConfig

    if input_file is None:
        _fail_with_usage(ctx, 'Input file is required')

    setup_logging(level_from_flags(verbose, quiet), log_file)

    try:
        config = NormalizeConfig(
            target_peak_db=max_peak,
            target_lufs=target_lufs,
            block_size=block_size,
            fade_in=fade_in,
            fade_out=fade_out,
            fade_curve=FadeCurve.from_name(fade_curve),
        )
        normalizer = AudioNormalizer(config)

        if peak_only:
            logger.info("Analyzing peak level of: %s", input_file)
            peak_db = normalizer.get_peak_level(input_file)
            click.echo(f"Peak level: {peak_db:.2f} dB")
            return

        if measure_lufs_only:
            logger.info("Analyzing LUFS level of: %s", input_file)
            lufs = normalizer.get_lufs_level(input_file)
            click.echo(f"LUFS level: {lufs:.2f} LUFS")
            return
    except AudioNormError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if output_file is None:
        _fail_with_usage(ctx, 'Output file is required for normalization')

    logger.debug("Input: %s -> Output: %s", input_file, output_file)
    if not normalizer.normalize(input_file, output_file):
        click.echo("Error: Normalization failed", err=True)
        sys.exit(1)

    if config.use_lufs:
        click.echo(
            f"LUFS normalization completed: {input_file} -> {output_file} "
            f"(target: {target_lufs:.2f} LUFS)"
        )
    else:
        click.echo(
            f"Peak normalization completed: {input_file} -> {output_file} "
            f"(target: {max_peak:.2f} dB)"
        )
    if config.has_fades:
        click.echo(f"Applied fades: in={fade_in:.2f}s, out={fade_out:.2f}s, curve={config.fade_curve.value}")


if __name__ == '__main__':
    cli()
