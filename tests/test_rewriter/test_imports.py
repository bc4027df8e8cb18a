"""Tests for generated import relocation."""

import pytest

from convex_codemod.errors import UnsupportedImportError
from convex_codemod.models import IMPORT_RULES
from convex_codemod.rewriter.imports import relocate_imports
from convex_codemod.syntax import SourceDocument

PLACEHOLDER = "PLACEHOLDER"


class TestRelocateImports:
    def given_source(self, source):
        self.document = SourceDocument.parse(source)

    def when_react_imports_are_relocated(self):
        self.aliases, self.api_path = relocate_imports(
            self.document, IMPORT_RULES["react"], PLACEHOLDER
        )
        self.output = self.document.render()

    def then_api_path_is(self, expected):
        assert self.api_path == expected

    def then_aliases_for(self, name, *expected):
        assert self.aliases[name] == list(expected)

    def then_output_is(self, expected):
        assert self.output == expected

    def test_records_aliases(self):
        """Aliased hooks are recorded under their imported name."""
        self.given_source(
            'import { useQuery as useConvexQuery, useMutation } from "../_generated/react";\n'
        )
        self.when_react_imports_are_relocated()
        self.then_aliases_for("useQuery", "useConvexQuery")
        self.then_aliases_for("useMutation", "useMutation")
        self.then_output_is(
            'import { useQuery as useConvexQuery, useMutation } from "convex/react";\n'
        )

    def test_api_path_comes_from_first_matching_import(self):
        """The first generated import decides where api is imported from."""
        self.given_source(
            'import { useQuery } from "../../convex/_generated/react";\n'
            'import { useAction } from "@/convex/_generated/react";\n'
        )
        self.when_react_imports_are_relocated()
        self.then_api_path_is("../../convex/_generated/api")
        self.then_output_is('import { useQuery, useAction } from "convex/react";\n')

    def test_falls_back_to_placeholder(self):
        """Without a generated import the placeholder path is returned."""
        self.given_source('import { useState } from "react";\n')
        self.when_react_imports_are_relocated()
        self.then_api_path_is(PLACEHOLDER)
        self.then_output_is('import { useState } from "react";\n')
        assert not self.aliases

    def test_leaves_imports_without_hooks_alone(self):
        """Generated imports with no hooks are not reformatted."""
        self.given_source('import {Doc,Id} from "./_generated/react";\n')
        self.when_react_imports_are_relocated()
        self.then_api_path_is("./_generated/api")
        self.then_output_is('import {Doc,Id} from "./_generated/react";\n')

    def test_namespace_import_is_unsupported(self):
        """Namespace imports of generated code raise."""
        self.given_source('import * as generated from "./_generated/react";\n')
        with pytest.raises(UnsupportedImportError) as exc_info:
            self.when_react_imports_are_relocated()
        assert "named imports" in str(exc_info.value)

    def test_keeps_type_only_specifiers(self):
        """Type specifiers stay on the generated import as written."""
        self.given_source(
            'import { type Doc, useQuery } from "./_generated/react";\nuseQuery;\n'
        )
        self.when_react_imports_are_relocated()
        self.then_output_is(
            'import { useQuery } from "convex/react";\n'
            'import { type Doc } from "./_generated/react";\n'
            "useQuery;\n"
        )
