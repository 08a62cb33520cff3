"""
engine.py - IBus engine for Vietnamese Telex/VNI typing
Bộ gõ tiếng Việt cho IBus

================================================================================
KEY HANDLING
================================================================================

In Vietnamese mode (V) the word being typed is shown as preedit and rebuilt
from its raw keys on every keystroke:

    key        preedit      committed
    ───        ───────      ─────────
    v          v
    i          vi
    e          vie
    e          viê
    t          viêt
    j          việt
    space                   "việt "

    BackSpace  drops the last raw key of the open word (not the last glyph)
    Return     commits the preedit, then lets the application see the key
    Escape     commits the raw keys as typed
    Ctrl/Alt   commits the preedit, then passes the key through

In direct mode (A) every key goes straight to the application.
"""

import logging

import gi
gi.require_version('IBus', '1.0')
from gi.repository import IBus

from accent import AccentStyle
from grammar import InputMethod
from session import IncrementalSession
import util

logger = logging.getLogger(__name__)

INPUT_MODE_NAMES = ('A', 'V')

PASS_THROUGH_MODIFIERS = (
    IBus.ModifierType.CONTROL_MASK
    | IBus.ModifierType.MOD1_MASK
    | IBus.ModifierType.SUPER_MASK
)


class EngineVi(IBus.Engine):
    '''
    http://lazka.github.io/pgi-docs/IBus-1.0/classes/Engine.html
    '''
    __gtype_name__ = 'EngineVi'

    def __init__(self):
        super().__init__()
        self._mode = 'V'
        self._load_configs()
        self._session = IncrementalSession(self._input_method, self._accent_style)
        self._init_props()

    def _load_configs(self):
        '''
        Load config.json and apply the logging level, the input method and
        the accent style it names.
        '''
        self._config, warnings = util.get_config_data()
        if warnings:
            logger.info('config.json was repaired while loading')
        logging.getLogger().setLevel(util.get_logging_level(self._config))
        self._input_method = util.get_input_method(self._config)
        self._accent_style = util.get_accent_style(self._config)
        logger.info(f'input_method: {self._input_method.value}, accent_style: {self._accent_style.value}')

    def _init_props(self):
        '''
        Create the property menu (typically the top-right corner).

        http://lazka.github.io/pgi-docs/IBus-1.0/classes/PropList.html
        '''
        self._prop_list = IBus.PropList()
        self._input_mode_prop = IBus.Property(
            key='InputMode',
            prop_type=IBus.PropType.MENU,
            symbol=IBus.Text.new_from_string(self._mode),
            label=IBus.Text.new_from_string(f"Input mode ({self._mode})"),
            icon=None,
            tooltip=None,
            sensitive=True,
            visible=True,
            state=IBus.PropState.UNCHECKED,
            sub_props=None)
        self._input_mode_prop.set_sub_props(self._init_sub_props([
            ('InputMode.Direct', "Direct input (A)", self._mode == 'A'),
            ('InputMode.Vietnamese', "Vietnamese (V)", self._mode == 'V'),
        ]))
        self._prop_list.append(self._input_mode_prop)
        self._method_prop = IBus.Property(
            key='Method',
            prop_type=IBus.PropType.MENU,
            label=IBus.Text.new_from_string(f"Input method ({self._input_method.value})"),
            icon=None,
            tooltip=None,
            sensitive=True,
            visible=True,
            state=IBus.PropState.UNCHECKED,
            sub_props=None)
        self._method_prop.set_sub_props(self._init_sub_props([
            ('Method.telex', "Telex", self._input_method is InputMethod.TELEX),
            ('Method.vni', "VNI", self._input_method is InputMethod.VNI),
        ]))
        self._prop_list.append(self._method_prop)
        self._style_prop = IBus.Property(
            key='Style',
            prop_type=IBus.PropType.MENU,
            label=IBus.Text.new_from_string(f"Accent style ({self._accent_style.value})"),
            icon=None,
            tooltip=None,
            sensitive=True,
            visible=True,
            state=IBus.PropState.UNCHECKED,
            sub_props=None)
        self._style_prop.set_sub_props(self._init_sub_props([
            ('Style.new', "New style (hoà, thuý)", self._accent_style is AccentStyle.NEW),
            ('Style.old', "Old style (hòa, thúy)", self._accent_style is AccentStyle.OLD),
        ]))
        self._prop_list.append(self._style_prop)

    def _init_sub_props(self, entries):
        props = IBus.PropList()
        for key, label, checked in entries:
            props.append(IBus.Property(key=key,
                                       prop_type=IBus.PropType.RADIO,
                                       label=IBus.Text.new_from_string(label),
                                       icon=None,
                                       tooltip=None,
                                       sensitive=True,
                                       visible=True,
                                       state=IBus.PropState.CHECKED if checked else IBus.PropState.UNCHECKED,
                                       sub_props=None))
        return props

    def do_focus_in(self):
        self.register_properties(self._prop_list)
        self._update_preedit()

    def do_focus_out(self):
        self._commit_preedit()

    def do_reset(self):
        self._commit_preedit()

    def do_disable(self):
        self._commit_preedit()

    def do_property_activate(self, prop_name, state):
        logger.info(f'property_activate({prop_name}, {state})')
        if state != IBus.PropState.CHECKED:
            return
        if prop_name.startswith('InputMode.'):
            mode = {
                'InputMode.Direct': 'A',
                'InputMode.Vietnamese': 'V',
            }.get(prop_name, 'A')
            self.set_mode(mode)
        elif prop_name.startswith('Method.'):
            self.set_input_method(InputMethod.from_name(prop_name.split('.', 1)[1]))
        elif prop_name.startswith('Style.'):
            self.set_accent_style(AccentStyle.from_name(prop_name.split('.', 1)[1]))

    def set_mode(self, mode):
        if mode not in INPUT_MODE_NAMES or mode == self._mode:
            return False
        logger.debug(f'set_mode({mode})')
        self._commit_preedit()
        self._mode = mode
        self._input_mode_prop.set_symbol(IBus.Text.new_from_string(self._mode))
        self._input_mode_prop.set_label(IBus.Text.new_from_string(f"Input mode ({self._mode})"))
        self.update_property(self._input_mode_prop)
        return True

    def set_input_method(self, method):
        '''
        Switch between Telex and VNI, and remember the choice in config.json
        '''
        if method is self._input_method:
            return False
        self._commit_preedit()
        self._input_method = method
        self._session.destroy()
        self._session = IncrementalSession(self._input_method, self._accent_style)
        self._config['input_method'] = method.value
        util.save_config_data(self._config)
        self._method_prop.set_label(IBus.Text.new_from_string(f"Input method ({method.value})"))
        self.update_property(self._method_prop)
        return True

    def set_accent_style(self, style):
        '''
        Switch between the old (hòa) and new (hoà) tone placement, and
        remember the choice in config.json
        '''
        if style is self._accent_style:
            return False
        self._commit_preedit()
        self._accent_style = style
        self._session.destroy()
        self._session = IncrementalSession(self._input_method, self._accent_style)
        self._config['accent_style'] = style.value
        util.save_config_data(self._config)
        self._style_prop.set_label(IBus.Text.new_from_string(f"Accent style ({style.value})"))
        self.update_property(self._style_prop)
        return True

    def do_process_key_event(self, keyval, keycode, state):
        return self.process_key_event(keyval, state)

    def process_key_event(self, keyval, state):
        if state & IBus.ModifierType.RELEASE_MASK:
            return False
        if self._mode == 'A':
            return False
        if state & PASS_THROUGH_MODIFIERS:
            self._commit_preedit()
            return False

        if keyval == IBus.BackSpace:
            units = self._session.open_units
            if not units:
                return False
            self._replay(units[:-1])
            self._update_preedit()
            return True
        if keyval == IBus.Escape:
            units = self._session.open_units
            if not units:
                return False
            self._session.clear()
            self._commit_string(''.join(units))
            return True
        if keyval in (IBus.Return, IBus.KP_Enter):
            self._commit_preedit()
            return False

        char = IBus.keyval_to_unicode(keyval)
        if not char or not char.isprintable():
            self._commit_preedit()
            return False
        self._session.push(char)
        if self._session.open_units:
            self._update_preedit()
        else:
            # a separator closed the word
            self._commit_string(self._session.commit())
        return True

    def _replay(self, units):
        self._session.clear()
        for unit in units:
            self._session.push(unit)

    def _commit_preedit(self):
        text = self._session.commit()
        if text:
            self._commit_string(text)
        else:
            self._update_preedit()

    def _commit_string(self, text):
        logger.debug(f'_commit_string("{text}")')
        self._update_preedit()
        if text:
            self.commit_text(IBus.Text.new_from_string(text))

    def _update_preedit(self):
        preedit = self._session.preedit()
        text = IBus.Text.new_from_string(preedit)
        if preedit:
            attrs = IBus.AttrList()
            attrs.append(IBus.Attribute.new(IBus.AttrType.UNDERLINE,
                                            IBus.AttrUnderline.SINGLE, 0, len(preedit)))
            text.set_attributes(attrs)
        self.update_preedit_text(text, len(preedit), bool(preedit))
