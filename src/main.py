"""
main.py - Entry point for the ibus-vi IME engine
Điểm khởi động của bộ gõ ibus-vi

================================================================================
WHAT THIS FILE DOES
================================================================================

    User selects "Vietnamese (ibus-vi)" in system settings
            ↓
    IBus daemon starts this script with --ibus
            ↓
    This script registers EngineVi with IBus
            ↓
    engine.py handles all keyboard input

Without --ibus the script registers its own IBus component and makes itself
the global engine, which is handy while developing without restarting the
IBus daemon.

User data lives in ~/.config/ibus-vi/:

    config.json     input_method, accent_style, logging_level
    ibus-vi.log     log file
================================================================================
"""

import getopt
import logging
import os
import sys

import gi
gi.require_version('IBus', '1.0')
from gi.repository import GLib, GObject, IBus

from engine import EngineVi  # noqa: F401  registers the EngineVi GType
import util


class IMApp:
    """
    Connection between EngineVi and the IBus daemon.

    exec_by_ibus=True: IBus started us, so only the D-Bus name is requested.
    exec_by_ibus=False: standalone; an IBus.Component and IBus.EngineDesc are
    registered by hand.
    """

    def __init__(self, exec_by_ibus: bool) -> None:
        if not isinstance(exec_by_ibus, bool):
            raise TypeError("The `exec_by_ibus` parameter must be a boolean value.")
        self.exec_by_ibus = exec_by_ibus
        self._mainloop = GLib.MainLoop()
        self._bus = IBus.Bus()
        self._bus.connect("disconnected", self._bus_disconnected_cb)
        self._factory = IBus.Factory(self._bus)
        self._factory.add_engine("vi", GObject.type_from_name("EngineVi"))
        if exec_by_ibus:
            self._bus.request_name("org.freedesktop.IBus.Vi", 0)
        else:
            self._component = IBus.Component(
                name="org.freedesktop.IBus.Vi",
                description="Vietnamese (Telex/VNI)",
                version=util.get_version(),
                license="MIT",
                author="ibus-vi developers",
                homepage="",
                textdomain=util.get_package_name())
            engine = IBus.EngineDesc(
                name="vi",
                longname="Vietnamese (ibus-vi)",
                description="Vietnamese Telex/VNI input",
                language="vi",
                license="MIT",
                author="ibus-vi developers",
                icon=util.get_package_name(),
                layout="default")
            self._component.add_engine(engine)
            self._bus.register_component(self._component)
            self._bus.set_global_engine_async("vi", -1, None, None, None)

    def run(self):
        self._mainloop.run()

    def _bus_disconnected_cb(self, bus=None):
        self._mainloop.quit()


def print_help(v: int = 0) -> None:
    print("-i, --ibus             executed by IBus.")
    print("-h, --help             show this message.")
    print("-d, --daemonize        daemonize ibus")
    sys.exit(v)


def main():
    os.umask(0o077)

    user_configdir = util.get_user_config_dir()
    os.makedirs(user_configdir, 0o700, True)

    logfile_name = os.path.join(user_configdir, util.get_package_name() + '.log')
    logging.basicConfig(filename=logfile_name, level=logging.WARNING, format='%(asctime)s %(levelname)-8s %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    logger = logging.getLogger()
    logger.info(f'main.py user_configdir: {user_configdir}')
    logger.info(f'main.py util.get_datadir(): {util.get_datadir()}')

    exec_by_ibus = False
    daemonize = False
    shortopt = "ihd"
    longopt = ["ibus", "help", "daemonize"]
    try:
        opts, args = getopt.getopt(sys.argv[1:], shortopt, longopt)
    except getopt.GetoptError as err:
        logger.error(err)
        sys.exit(1)

    for o, a in opts:
        if o in ("-h", "--help"):
            print_help(0)
        elif o in ("-d", "--daemonize"):
            daemonize = True
        elif o in ("-i", "--ibus"):
            exec_by_ibus = True
    logger.info(f'daemonize? : {daemonize}')
    logger.info(f'IBus exec? : {exec_by_ibus}')

    if daemonize:
        if os.fork():
            sys.exit()
    IMApp(exec_by_ibus).run()


if __name__ == "__main__":
    main()
