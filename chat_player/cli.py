"""Console script for chat_player."""
import argparse
from docstring_parser import parse as doc_parse


from .chat_player import (
    ChatPlayer,
    run
)

from .metadata import (
    __version__,
    __summary__,
    __program__
)

from .utils.core import get_default_args

from .debugging import (
    disable_logger,
    set_log_level
)


def str2bool(value):
    if isinstance(value, bool):
        return value
    value = value.lower()
    if value in ('true', 'yes',  't', 'y', '1', 'enable'):
        return True
    elif value in ('false', 'no', 'f', 'n', '0', 'disable'):
        return False
    else:
        raise argparse.ArgumentTypeError(
            f'Boolean value expected: {value} is not a boolean')


def get_info(function):
    """Get the help text and default value of each documented parameter

    :param function: The function to inspect
    :type function: function
    :return: Mapping of parameter names to `add_argument` keyword arguments
    :rtype: dict
    """
    info = {}

    docstring = doc_parse(function.__doc__)
    args = get_default_args(function)

    for param in docstring.params:
        info[param.arg_name] = {
            'help': param.description,
            'default': args.get(param.arg_name)
        }
    return info


def create_parser():
    parser = argparse.ArgumentParser(description=__summary__)
    parser.prog = __program__

    parser.add_argument('--version', action='version', version=__version__)

    # get help and default info
    play_info = get_info(ChatPlayer.play)
    init_info = get_info(ChatPlayer.__init__)

    def add_param(param_type, group, *keys, **kwargs):
        info = play_info if param_type == 'play' else init_info
        key = keys[0].lstrip('-')
        group.add_argument(*keys, **info[key], **kwargs)

    def add_play_param(group, *keys, **kwargs):
        add_param('play', group, *keys, **kwargs)

    def add_init_param(group, *keys, **kwargs):
        add_param('init', group, *keys, **kwargs)

    add_play_param(parser, 'url')

    playback_group = parser.add_argument_group('Playback Arguments')
    add_play_param(playback_group, '--delay', '-d', type=int)
    add_play_param(playback_group, '--timeout', type=float)
    add_play_param(playback_group, '--cancel_pending',
                   type=str2bool, nargs='?', const=True)

    retry_group = parser.add_argument_group('Retry Arguments')
    add_play_param(retry_group, '--max_attempts', type=int)
    add_play_param(retry_group, '--retry_timeout', type=float)

    # Debugging only available from the CLI
    debug_group = parser.add_argument_group('Debugging/Testing Arguments')

    on_debug_options = debug_group.add_mutually_exclusive_group()
    on_debug_options.add_argument('--pause_on_debug', action='store_true',
                                  help='Pause on certain debug messages, defaults to False')
    on_debug_options.add_argument('--exit_on_debug', action='store_true',
                                  help='Exit when something unexpected happens, defaults to False')

    debug_options = debug_group.add_mutually_exclusive_group()
    debug_options.add_argument('--logging', choices=['none', 'debug', 'info', 'warning', 'error', 'critical'],
                               help='Level of logging to display, defaults to info', default='info')
    debug_options.add_argument('--verbose', '-v', action='store_true',
                               help='Print various debugging information. This is equivalent to setting logging to debug. Defaults to False')
    debug_options.add_argument('--quiet', '-q', action='store_true',
                               help='Activate quiet mode (hide all output), defaults to False')

    init_group = parser.add_argument_group('Initialisation Arguments')
    add_init_param(init_group, '--cookies', '-c')
    add_init_param(init_group, '--proxy', '-p')

    parser._positionals.title = 'Mandatory Arguments'
    parser._optionals.title = 'General Arguments'

    return parser


def main(cli_args=None):
    args = create_parser().parse_args(args=cli_args)

    if args.verbose:
        args.logging = 'debug'

    if args.quiet or args.logging == 'none':
        disable_logger()
    else:
        set_log_level(args.logging)

    run(**args.__dict__)
