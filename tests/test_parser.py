"""Tests for pattern-based import extraction."""

import pytest

from orphangraph.parser import RegexImportExtractor, extract_specifiers, scan_content


def test_static_imports_with_and_without_bindings():
    code = '''
import React from 'react';
import Header from './Header';
import { a, b as c } from "../lib/util";
import * as ns from './ns';
import './styles.css';
import type { User } from '@/types';
'''
    specs = extract_specifiers(code)
    assert specs == {"./Header", "../lib/util", "./ns", "./styles.css", "@/types"}


def test_multiline_named_import():
    code = '''import {
  first,
  second,
} from './multi';
'''
    assert extract_specifiers(code) == {"./multi"}


def test_named_import_list_with_comments():
    code = '''import {
  first, // keeps the old name
  /* deprecated */ second,
} from './shared';
import Default, * as everything from './both';
'''
    assert extract_specifiers(code) == {"./shared", "./both"}


def test_dynamic_imports_and_require():
    code = '''
const Page = lazy(() => import('./pages/Settings'));
const fmt = require("./format");
const lodash = require('lodash');
'''
    assert extract_specifiers(code) == {"./pages/Settings", "./format"}


def test_reexports():
    code = '''
export * from './format';
export * as helpers from './helpers';
export { default as Button, type ButtonProps } from './Button';
'''
    assert extract_specifiers(code) == {"./format", "./helpers", "./Button"}


def test_bare_package_specifiers_are_dropped():
    code = '''
import next from 'next';
import { z } from 'zod';
import x from '@scope/pkg';
'''
    assert extract_specifiers(code) == set()


def test_rooted_specifier_is_internal():
    assert extract_specifiers("import cfg from '/config/app';") == {"/config/app"}


def test_duplicate_specifiers_collapse():
    code = '''
import a from './shared';
import { b } from './shared';
const c = require('./shared');
'''
    assert extract_specifiers(code) == {"./shared"}


def test_custom_alias_prefixes():
    extractor = RegexImportExtractor(alias_prefixes={"~/": "app"})
    code = "import a from '~/thing';\nimport b from '@/other';"
    assert extractor.extract(code) == {"~/thing"}


def test_identifier_containing_import_is_ignored():
    code = "const important = 1;\nreimport('./nope');\n"
    assert extract_specifiers(code) == set()


@pytest.mark.parametrize(
    "code, default, named",
    [
        ("export default function Page() {}", True, False),
        ("export const x = 1;", False, True),
        ("export interface User { id: string }", False, True),
        ("export { a as default };", True, True),
        ("module.exports = { run };", True, False),
        ("exports.run = run;", False, True),
        ("export {};", False, False),
        ("export { };\nconsole.log('x');", False, False),
        ("export {\n  helper,\n};", False, True),
        ("const x = 1;", False, False),
    ],
)
def test_scan_content_export_flags(code, default, named):
    facts = scan_content(code)
    assert facts.has_default_export is default
    assert facts.has_named_exports is named


def test_scan_content_todo_markers():
    assert scan_content("// TODO: finish this\nexport const x = 1;").has_todo
    assert scan_content("/* FIXME later */").has_todo
    assert scan_content("/**\n * HACK around the bug\n */").has_todo
    assert not scan_content("const label = 'todo list';").has_todo
