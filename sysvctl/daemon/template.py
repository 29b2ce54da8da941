"""Init script generation.

Rendering is a pure function of a ServiceDescriptor and the host Config;
nothing here touches the filesystem.

Escaping contract:

* the executable and every argument are shell-quoted one by one, and the
  resulting command line is quoted again as a whole for its assignment;
* paths, the run-as user and the working directory are shell-quoted;
* free text (description, display name) lands in comment headers, so
  control characters and line breaks are collapsed to single spaces;
* values are substituted once and never re-read as template syntax.
"""

import re
import shlex

from sysvctl.config.schema import Config
from sysvctl.daemon.base import ServiceDescriptor

_INIT_SCRIPT_TEMPLATE = r"""#!/bin/sh
# For RedHat and cousins:
# chkconfig: - 99 01
# description: {description}
# processname: {processname}

### BEGIN INIT INFO
# Provides:          {provides}
# Required-Start:
# Required-Stop:
# Default-Start:     2 3 4 5
# Default-Stop:      0 1 6
# Short-Description: {short_description}
# Description:       {description}
### END INIT INFO

if [ -x {runuser} ]
then
    SU={runuser}
else
    SU={su}
fi

cmd={command}

script=$(readlink -f "$0")
name=$(basename "$script")
user={user}
workdir={workdir}
shell={shell}
pid_file={run_dir}/"$name.pid"
stdout_log={log_dir}/"$name.log"
stderr_log={log_dir}/"$name.err"

[ -e {sysconfig_dir}/"$name" ] && . {sysconfig_dir}/"$name"

exec {python} -m sysvctl supervise \
    --name "$name" \
    --command "$cmd" \
    --user "$user" \
    --workdir "$workdir" \
    --su "$SU" \
    --shell "$shell" \
    --pid-file "$pid_file" \
    --stdout-log "$stdout_log" \
    --stderr-log "$stderr_log" \
    --script "$script" \
    -- "$1"
"""

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def comment_text(value: str) -> str:
    """Flatten free text so it stays on one comment line."""
    return " ".join(_CONTROL_CHARS.sub(" ", value).split())


def command_line(descriptor: ServiceDescriptor) -> str:
    """The worker command as one shell string, each word quoted."""
    return shlex.join([descriptor.exec_path(), *descriptor.arguments])


def render_template(template: str, fields: dict[str, str]) -> str:
    """Substitute ``fields``; an unknown or malformed placeholder raises."""
    return template.format_map(fields)


def render_init_script(descriptor: ServiceDescriptor, config: Config) -> str:
    """Generate the /etc/init.d control script for ``descriptor``.

    Args:
        descriptor: Service to render. Every field is treated as untrusted.
        config: Host layout and tool paths baked into the script.

    Returns:
        Complete script content.
    """
    paths, tools = config.paths, config.tools
    q = shlex.quote
    fields = {
        "description": comment_text(descriptor.description),
        "processname": comment_text(descriptor.exec_path()),
        "provides": comment_text(descriptor.name),
        "short_description": comment_text(descriptor.label),
        "runuser": q(str(tools.runuser)),
        "su": q(str(tools.su)),
        "command": q(command_line(descriptor)),
        "user": q(descriptor.user_name),
        "workdir": q(descriptor.working_directory),
        "shell": q(tools.shell),
        "run_dir": q(str(paths.run_dir)),
        "log_dir": q(str(paths.log_dir)),
        "sysconfig_dir": q(str(paths.sysconfig_dir)),
        "python": q(tools.python),
    }
    return render_template(_INIT_SCRIPT_TEMPLATE, fields)
