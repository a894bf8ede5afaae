"""Host side of the reset transformation.

Frontend::

    from autoreset.host.frontend import DeclarationBuilder, declaration_from_source

Expander::

    from autoreset.host.expander import SourceExpander

Writing and undo::

    from autoreset.host.applier import ExpansionApplier
    from autoreset.host.undo import UndoManager
"""
