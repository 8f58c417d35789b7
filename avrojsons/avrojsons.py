"""

Command line utility to convert Avro schemas to JSON Schema documents.

"""


import argparse
import json
import logging
import os
import sys
import tempfile
from avrojsons import _version

ARG_TYPES = {'str': str, 'int': int, 'bool': bool}


def load_commands():
    """Load the commands from the commands.json file."""
    commands_path = os.path.join(os.path.dirname(__file__), 'commands.json')
    with open(commands_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_subparsers(subparsers, commands):
    """Create subparsers for the commands."""
    for command in commands:
        cmd_parser = subparsers.add_parser(command['command'], help=command['description'])
        for arg in command['args']:
            kwargs = {
                'type': ARG_TYPES[arg['type']],
                'help': arg['help'],
            }

            if 'nargs' in arg:
                kwargs['nargs'] = arg['nargs']
            if 'choices' in arg:
                kwargs['choices'] = arg['choices']
            if 'default' in arg:
                kwargs['default'] = arg['default']
            if 'dest' in arg:
                kwargs['dest'] = arg['dest']
            if arg['type'] == 'bool':
                kwargs['action'] = arg.get('action', 'store_true')
                del kwargs['type']
            carg = cmd_parser.add_argument(arg['name'], **kwargs)
            carg.required = arg.get('required', True)


def dynamic_import(module, func):
    """Dynamically import a module and function."""
    mod = __import__(module, fromlist=[func])
    return getattr(mod, func)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')


def main():
    """Main function for the command line utility."""
    commands = load_commands()
    parser = argparse.ArgumentParser(description='Convert Avro schemas to JSON Schema documents.')
    parser.add_argument('--version', action='store_true', help='Print the version of avrojsons.')

    subparsers = parser.add_subparsers(dest='command')
    create_subparsers(subparsers, commands)

    args = parser.parse_args()

    if getattr(args, 'version', False):
        print(f'avrojsons {_version.version}')
        return

    if args.command is None:
        parser.print_help()
        return

    configure_logging(getattr(args, 'verbose', False))
    temp_input = None
    temp_output = None
    try:
        command = next((cmd for cmd in commands if cmd['command'] == args.command), None)
        if not command:
            print(f"Error: Command {args.command} not found.")
            sys.exit(1)

        input_file_path = getattr(args, 'input', None)
        if input_file_path is None:
            temp_input = tempfile.NamedTemporaryFile(delete=False, mode='w', encoding='utf-8', suffix='.avsc')
            input_file_path = temp_input.name
            # read to EOF
            s = sys.stdin.read()
            while s:
                temp_input.write(s)
                s = sys.stdin.read()
            temp_input.flush()
            temp_input.close()

        suppress_print = False
        output_file_path = getattr(args, 'out', None)
        if output_file_path is None:
            if os.path.isdir(input_file_path):
                print("Error: --out is required for directory input")
                sys.exit(1)
            suppress_print = True
            temp_output = tempfile.NamedTemporaryFile(delete=False, suffix='.json')
            temp_output.close()
            output_file_path = temp_output.name

        def printmsg(s):
            if not suppress_print:
                print(s)

        module_name, func_name = command['function']['name'].rsplit('.', 1)
        func = dynamic_import(module_name, func_name)
        func_args = {}
        for arg, val in command['function']['args'].items():
            if val == 'input_file_path':
                func_args[arg] = input_file_path
            elif val == 'output_file_path':
                func_args[arg] = output_file_path
            elif val.startswith('args.'):
                if hasattr(args, val[5:]):
                    func_args[arg] = getattr(args, val[5:])
            else:
                func_args[arg] = val
        printmsg(f'Executing {command["description"]} with input {input_file_path} and output {output_file_path}')
        result = func(**func_args)

        if temp_output:
            with open(output_file_path, 'r', encoding='utf-8') as f:
                sys.stdout.write(f.read())

        for failed_path, error in result.failed:
            print(f"Error: {failed_path}: {error}")
        if not result.ok:
            sys.exit(1)
        printmsg(f'Converted {len(result.converted)} schema(s)')

    except (OSError, ValueError) as e:
        print("Error: ", str(e))
        sys.exit(1)
    finally:
        for temp_file in (temp_input, temp_output):
            if temp_file:
                try:
                    os.remove(temp_file.name)
                except OSError as e:
                    print(f"Error: Could not delete temporary file {temp_file.name}. {e}")


if __name__ == "__main__":
    main()
