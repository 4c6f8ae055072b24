# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for integration tests.

Provides a representative iOS application project in canonical form:
- Sources, Frameworks, Resources, CopyFiles and ShellScript phases
- A localized storyboard behind a variant group
- A framework linked in one phase and embedded by another
- Unmodeled kinds (project, target, configurations) kept as generic objects
"""

from pathlib import Path

import pytest

SAMPLE_PROJECT_NAME = "App"

_LINES = [
    "// !$*UTF8*$!",
    "{",
    "\tarchiveVersion = 1;",
    "\tclasses = {",
    "\t};",
    "\tobjectVersion = 50;",
    "\tobjects = {",
    "",
    "/* Begin PBXBuildFile section */",
    "\t\t9F0000000000000000000E01 /* AppDelegate.swift in Sources */ = {isa = PBXBuildFile; "
    "fileRef = 9F0000000000000000000C01 /* AppDelegate.swift */; };",
    "\t\t9F0000000000000000000E02 /* Assets.xcassets in Resources */ = {isa = PBXBuildFile; "
    "fileRef = 9F0000000000000000000C02 /* Assets.xcassets */; };",
    "\t\t9F0000000000000000000E03 /* Main.storyboard in Resources */ = {isa = PBXBuildFile; "
    "fileRef = 9F0000000000000000000D01 /* Main.storyboard */; };",
    "\t\t9F0000000000000000000E04 /* Kit.framework in Frameworks */ = {isa = PBXBuildFile; "
    "fileRef = 9F0000000000000000000C05 /* Kit.framework */; };",
    "\t\t9F0000000000000000000E05 /* Kit.framework in Embed Frameworks */ = {isa = PBXBuildFile; "
    "fileRef = 9F0000000000000000000C05 /* Kit.framework */; "
    "settings = {ATTRIBUTES = (CodeSignOnCopy, RemoveHeadersOnCopy, ); }; };",
    "/* End PBXBuildFile section */",
    "",
    "/* Begin PBXCopyFilesBuildPhase section */",
    "\t\t9F0000000000000000000F04 /* Embed Frameworks */ = {",
    "\t\t\tisa = PBXCopyFilesBuildPhase;",
    "\t\t\tbuildActionMask = 2147483647;",
    '\t\t\tdstPath = "";',
    "\t\t\tdstSubfolderSpec = 10;",
    "\t\t\tfiles = (",
    "\t\t\t\t9F0000000000000000000E05 /* Kit.framework in Embed Frameworks */,",
    "\t\t\t);",
    '\t\t\tname = "Embed Frameworks";',
    "\t\t\trunOnlyForDeploymentPostprocessing = 0;",
    "\t\t};",
    "/* End PBXCopyFilesBuildPhase section */",
    "",
    "/* Begin PBXFileReference section */",
    "\t\t9F0000000000000000000C01 /* AppDelegate.swift */ = {isa = PBXFileReference; "
    'lastKnownFileType = sourcecode.swift; path = AppDelegate.swift; sourceTree = "<group>"; };',
    "\t\t9F0000000000000000000C02 /* Assets.xcassets */ = {isa = PBXFileReference; "
    'lastKnownFileType = folder.assetcatalog; path = Assets.xcassets; sourceTree = "<group>"; };',
    "\t\t9F0000000000000000000C03 /* App.app */ = {isa = PBXFileReference; "
    "explicitFileType = wrapper.application; includeInIndex = 0; path = App.app; "
    "sourceTree = BUILT_PRODUCTS_DIR; };",
    "\t\t9F0000000000000000000C04 /* Main.storyboard */ = {isa = PBXFileReference; "
    "lastKnownFileType = file.storyboard; name = Base; path = Base.lproj/Main.storyboard; "
    'sourceTree = "<group>"; };',
    "\t\t9F0000000000000000000C05 /* Kit.framework */ = {isa = PBXFileReference; "
    "lastKnownFileType = wrapper.framework; name = Kit.framework; path = Kit.framework; "
    "sourceTree = BUILT_PRODUCTS_DIR; };",
    "/* End PBXFileReference section */",
    "",
    "/* Begin PBXFrameworksBuildPhase section */",
    "\t\t9F0000000000000000000F02 /* Frameworks */ = {",
    "\t\t\tisa = PBXFrameworksBuildPhase;",
    "\t\t\tbuildActionMask = 2147483647;",
    "\t\t\tfiles = (",
    "\t\t\t\t9F0000000000000000000E04 /* Kit.framework in Frameworks */,",
    "\t\t\t);",
    "\t\t\trunOnlyForDeploymentPostprocessing = 0;",
    "\t\t};",
    "/* End PBXFrameworksBuildPhase section */",
    "",
    "/* Begin PBXGroup section */",
    "\t\t9F0000000000000000000B01 = {",
    "\t\t\tisa = PBXGroup;",
    "\t\t\tchildren = (",
    "\t\t\t\t9F0000000000000000000B02 /* App */,",
    "\t\t\t\t9F0000000000000000000C05 /* Kit.framework */,",
    "\t\t\t\t9F0000000000000000000B03 /* Products */,",
    "\t\t\t);",
    '\t\t\tsourceTree = "<group>";',
    "\t\t};",
    "\t\t9F0000000000000000000B02 /* App */ = {",
    "\t\t\tisa = PBXGroup;",
    "\t\t\tchildren = (",
    "\t\t\t\t9F0000000000000000000C01 /* AppDelegate.swift */,",
    "\t\t\t\t9F0000000000000000000D01 /* Main.storyboard */,",
    "\t\t\t\t9F0000000000000000000C02 /* Assets.xcassets */,",
    "\t\t\t);",
    "\t\t\tpath = App;",
    '\t\t\tsourceTree = "<group>";',
    "\t\t};",
    "\t\t9F0000000000000000000B03 /* Products */ = {",
    "\t\t\tisa = PBXGroup;",
    "\t\t\tchildren = (",
    "\t\t\t\t9F0000000000000000000C03 /* App.app */,",
    "\t\t\t);",
    "\t\t\tname = Products;",
    '\t\t\tsourceTree = "<group>";',
    "\t\t};",
    "/* End PBXGroup section */",
    "",
    "/* Begin PBXNativeTarget section */",
    "\t\t9F0000000000000000000A02 /* App */ = {",
    "\t\t\tisa = PBXNativeTarget;",
    "\t\t\tbuildConfigurationList = 9F0000000000000000000A04 "
    '/* Build configuration list for PBXNativeTarget "App" */;',
    "\t\t\tbuildPhases = (",
    "\t\t\t\t9F0000000000000000000F01 /* Sources */,",
    "\t\t\t\t9F0000000000000000000F02 /* Frameworks */,",
    "\t\t\t\t9F0000000000000000000F03 /* Resources */,",
    "\t\t\t\t9F0000000000000000000F04 /* Embed Frameworks */,",
    "\t\t\t\t9F0000000000000000000F05 /* ShellScript */,",
    "\t\t\t);",
    "\t\t\tbuildRules = (",
    "\t\t\t);",
    "\t\t\tdependencies = (",
    "\t\t\t);",
    "\t\t\tname = App;",
    "\t\t\tproductName = App;",
    "\t\t\tproductReference = 9F0000000000000000000C03 /* App.app */;",
    '\t\t\tproductType = "com.apple.product-type.application";',
    "\t\t};",
    "/* End PBXNativeTarget section */",
    "",
    "/* Begin PBXProject section */",
    "\t\t9F0000000000000000000A01 /* Project object */ = {",
    "\t\t\tisa = PBXProject;",
    "\t\t\tattributes = {",
    "\t\t\t\tLastUpgradeCheck = 1200;",
    "\t\t\t};",
    "\t\t\tbuildConfigurationList = 9F0000000000000000000A03 "
    '/* Build configuration list for PBXProject "App" */;',
    '\t\t\tcompatibilityVersion = "Xcode 9.3";',
    "\t\t\tdevelopmentRegion = en;",
    "\t\t\thasScannedForEncodings = 0;",
    "\t\t\tknownRegions = (",
    "\t\t\t\ten,",
    "\t\t\t\tBase,",
    "\t\t\t);",
    "\t\t\tmainGroup = 9F0000000000000000000B01;",
    "\t\t\tproductRefGroup = 9F0000000000000000000B03 /* Products */;",
    '\t\t\tprojectDirPath = "";',
    '\t\t\tprojectRoot = "";',
    "\t\t\ttargets = (",
    "\t\t\t\t9F0000000000000000000A02 /* App */,",
    "\t\t\t);",
    "\t\t};",
    "/* End PBXProject section */",
    "",
    "/* Begin PBXResourcesBuildPhase section */",
    "\t\t9F0000000000000000000F03 /* Resources */ = {",
    "\t\t\tisa = PBXResourcesBuildPhase;",
    "\t\t\tbuildActionMask = 2147483647;",
    "\t\t\tfiles = (",
    "\t\t\t\t9F0000000000000000000E02 /* Assets.xcassets in Resources */,",
    "\t\t\t\t9F0000000000000000000E03 /* Main.storyboard in Resources */,",
    "\t\t\t);",
    "\t\t\trunOnlyForDeploymentPostprocessing = 0;",
    "\t\t};",
    "/* End PBXResourcesBuildPhase section */",
    "",
    "/* Begin PBXShellScriptBuildPhase section */",
    "\t\t9F0000000000000000000F05 /* ShellScript */ = {",
    "\t\t\tisa = PBXShellScriptBuildPhase;",
    "\t\t\tbuildActionMask = 2147483647;",
    "\t\t\tfiles = (",
    "\t\t\t);",
    "\t\t\tinputPaths = (",
    "\t\t\t);",
    "\t\t\toutputPaths = (",
    "\t\t\t);",
    "\t\t\trunOnlyForDeploymentPostprocessing = 0;",
    "\t\t\tshellPath = /bin/sh;",
    '\t\t\tshellScript = "echo \\"Building ${PRODUCT_NAME}\\"\\n";',
    "\t\t};",
    "/* End PBXShellScriptBuildPhase section */",
    "",
    "/* Begin PBXSourcesBuildPhase section */",
    "\t\t9F0000000000000000000F01 /* Sources */ = {",
    "\t\t\tisa = PBXSourcesBuildPhase;",
    "\t\t\tbuildActionMask = 2147483647;",
    "\t\t\tfiles = (",
    "\t\t\t\t9F0000000000000000000E01 /* AppDelegate.swift in Sources */,",
    "\t\t\t);",
    "\t\t\trunOnlyForDeploymentPostprocessing = 0;",
    "\t\t};",
    "/* End PBXSourcesBuildPhase section */",
    "",
    "/* Begin PBXVariantGroup section */",
    "\t\t9F0000000000000000000D01 /* Main.storyboard */ = {",
    "\t\t\tisa = PBXVariantGroup;",
    "\t\t\tchildren = (",
    "\t\t\t\t9F0000000000000000000C04 /* Main.storyboard */,",
    "\t\t\t);",
    "\t\t\tname = Main.storyboard;",
    '\t\t\tsourceTree = "<group>";',
    "\t\t};",
    "/* End PBXVariantGroup section */",
    "",
    "/* Begin XCBuildConfiguration section */",
    "\t\t9F0000000000000000000A05 /* Debug */ = {",
    "\t\t\tisa = XCBuildConfiguration;",
    "\t\t\tbuildSettings = {",
    "\t\t\t\tSDKROOT = iphoneos;",
    "\t\t\t\tSWIFT_VERSION = 5.0;",
    "\t\t\t};",
    "\t\t\tname = Debug;",
    "\t\t};",
    "\t\t9F0000000000000000000A06 /* Debug */ = {",
    "\t\t\tisa = XCBuildConfiguration;",
    "\t\t\tbuildSettings = {",
    "\t\t\t\tINFOPLIST_FILE = App/Info.plist;",
    "\t\t\t\tPRODUCT_BUNDLE_IDENTIFIER = com.example.App;",
    '\t\t\t\tPRODUCT_NAME = "$(TARGET_NAME)";',
    "\t\t\t};",
    "\t\t\tname = Debug;",
    "\t\t};",
    "/* End XCBuildConfiguration section */",
    "",
    "/* Begin XCConfigurationList section */",
    "\t\t9F0000000000000000000A03 "
    '/* Build configuration list for PBXProject "App" */ = {',
    "\t\t\tisa = XCConfigurationList;",
    "\t\t\tbuildConfigurations = (",
    "\t\t\t\t9F0000000000000000000A05 /* Debug */,",
    "\t\t\t);",
    "\t\t\tdefaultConfigurationIsVisible = 0;",
    "\t\t\tdefaultConfigurationName = Debug;",
    "\t\t};",
    "\t\t9F0000000000000000000A04 "
    '/* Build configuration list for PBXNativeTarget "App" */ = {',
    "\t\t\tisa = XCConfigurationList;",
    "\t\t\tbuildConfigurations = (",
    "\t\t\t\t9F0000000000000000000A06 /* Debug */,",
    "\t\t\t);",
    "\t\t\tdefaultConfigurationIsVisible = 0;",
    "\t\t\tdefaultConfigurationName = Debug;",
    "\t\t};",
    "/* End XCConfigurationList section */",
    "\t};",
    "\trootObject = 9F0000000000000000000A01 /* Project object */;",
    "}",
    "",
]

SAMPLE_PROJECT_TEXT = "\n".join(_LINES)


@pytest.fixture
def sample_project_text() -> str:
    """Canonical text of the sample project."""
    return SAMPLE_PROJECT_TEXT


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Write the sample project as App.xcodeproj/project.pbxproj.

    Returns:
        Path to the .xcodeproj bundle directory
    """
    bundle = tmp_path / f"{SAMPLE_PROJECT_NAME}.xcodeproj"
    bundle.mkdir()
    (bundle / "project.pbxproj").write_text(SAMPLE_PROJECT_TEXT, encoding="utf-8")
    return bundle
