"""Tests for converter dispatch and the generated SwiftUI fragments."""

import pytest

from layoutc.ast.node import LayoutNode
from layoutc.compiler.converters import ConverterRegistry, NodeKind
from layoutc.compiler.converters.base import ConversionContext, Converter


def convert(data: dict, registry: ConverterRegistry = None) -> str:
    registry = registry or ConverterRegistry()
    return registry.convert(LayoutNode.from_dict(data)).text()


def test_unregistered_kind_yields_placeholder():
    text = convert({"kind": "Hologram", "width": 20})

    assert 'Text("Unsupported component: Hologram")' in text
    assert ".foregroundColor(.red)" in text


def test_label():
    text = convert({"kind": "Label", "text": "Hello", "fontSize": 14, "fontColor": "#336699"})

    assert text.splitlines() == [
        'Text("Hello")',
        "    .font(.system(size: 14))",
        '    .foregroundColor(Color(hex: "#336699"))',
    ]


def test_label_binding_text():
    assert convert({"kind": "Text", "text": "@{title}"}).startswith("Text(viewModel.data.title)")


def test_button_uses_click_handler_once():
    text = convert({"kind": "Button", "text": "Go", "onClick": "@{onGo}"})

    assert text.splitlines()[0] == "Button(action: { viewModel.onGo() }) {"
    assert ".onTapGesture" not in text


def test_tap_gesture_on_plain_views():
    text = convert({"kind": "Image", "src": "logo", "onClick": "@{onLogo}"})

    assert 'Image("logo")' in text
    assert ".onTapGesture { viewModel.onLogo() }" in text


def test_common_modifiers():
    text = convert(
        {
            "kind": "Label",
            "width": "matchParent",
            "height": 44,
            "padding": [4, 8],
            "background": "#FFFFFF",
            "cornerRadius": 6,
            "visibility": "gone",
        }
    )

    assert ".frame(maxWidth: .infinity, minHeight: 44, maxHeight: 44)" in text
    assert ".padding(.vertical, 4)" in text
    assert ".padding(.horizontal, 8)" in text
    assert '.background(Color(hex: "#FFFFFF"))' in text
    assert ".cornerRadius(6)" in text
    assert ".hidden()" in text


def test_vertical_container():
    text = convert(
        {
            "kind": "View",
            "orientation": "vertical",
            "alignment": "top",
            "child": [{"kind": "Label", "text": "a"}, {"kind": "Label", "text": "b"}],
        }
    )

    assert text.splitlines() == [
        "VStack(alignment: .leading, spacing: 0) {",
        '    Text("a")',
        '    Text("b")',
        "    Spacer(minLength: 0)",
        "}",
    ]


def test_weighted_container():
    text = convert(
        {
            "kind": "View",
            "orientation": "horizontal",
            "child": [{"kind": "Label", "weight": 1}, {"kind": "Label", "width": 80}],
        }
    )

    assert text.startswith("WeightedHStack(alignment: .top, spacing: 0) {")
    assert "        .weight(1)" in text


def test_layered_container_sets_z_order():
    text = convert({"kind": "View", "child": [{"kind": "Label"}, {"kind": "Image", "src": "x"}]})

    assert text.startswith("ZStack(alignment: .topLeading) {")
    assert ".zIndex(0)" in text
    assert ".zIndex(1)" in text


def test_relative_container_anchors():
    text = convert(
        {
            "kind": "View",
            "child": [
                {"kind": "Label", "id": "title", "alignTop": True},
                {"kind": "Label", "id": "body", "alignBottomOfView": "title"},
            ],
        }
    )

    assert text.startswith("RelativePositionContainer(alignment: .topLeading) {")
    assert '.relativePosition(id: "title", anchors: [.parent(.top)])' in text
    assert '.relativePosition(id: "body", anchors: [.below("title")])' in text


def test_data_holders_are_not_rendered():
    text = convert({"kind": "View", "child": [{"data": [{"name": "x"}]}]})

    assert text == "Color.clear"


def test_external_registration():
    registry = ConverterRegistry()

    @registry.converter("Badge")
    class BadgeConverter(Converter):
        def body(self, node, ctx):
            return [f'Badge("{node.get("text")}")']

    assert registry.is_registered("Badge")
    assert convert({"kind": "Badge", "text": "3"}, registry) == 'Badge("3")'
    assert not ConverterRegistry().is_registered("Badge")


def test_registration_overrides_builtin():
    registry = ConverterRegistry()

    class Plain(Converter):
        def body(self, node, ctx):
            return ["EmptyView()"]

    registry.register(NodeKind.SPACER.value, Plain)
    assert convert({"kind": "Spacer"}, registry) == "EmptyView()"

    registry.unregister("Spacer")
    assert convert({"kind": "Spacer"}, registry) == "Spacer()"


def test_register_rejects_non_converters():
    with pytest.raises(TypeError):
        ConverterRegistry().register("X", object)


@pytest.mark.parametrize(
    "data, expected",
    [
        ({"kind": "TextView", "text": "@{bio}"}, "TextEditor(text: $viewModel.data.bio)"),
        (
            {"kind": "Slider", "value": "@{volume}", "range": [0, 10]},
            "Slider(value: $viewModel.data.volume, in: 0...10)",
        ),
        ({"kind": "Progress", "progress": 0.25}, "ProgressView(value: 0.25)"),
        ({"kind": "Indicator"}, ".progressViewStyle(.circular)"),
        ({"kind": "Segment", "items": ["A", "B"]}, ".pickerStyle(.segmented)"),
        ({"kind": "Radio", "id": "monthly", "text": "Monthly"}, 'Image(systemName: "circle")'),
        ({"kind": "SelectBox", "items": ["S", "M"]}, 'Text("S").tag("S")'),
        ({"kind": "Web", "url": "https://example.com"}, 'WebView(url: URL(string: "https://example.com"))'),
        ({"kind": "IconLabel", "text": "Home", "systemIcon": "house"}, 'Label("Home", systemImage: "house")'),
        ({"kind": "Blur"}, ".background(.ultraThinMaterial)"),
        ({"kind": "Table", "child": [{"kind": "Label", "text": "a"}]}, ".listStyle(.plain)"),
        ({"kind": "Collection", "child": [{"kind": "Label", "text": "a"}]}, "LazyVGrid("),
        ({"kind": "Checkbox", "isOn": "@{agreed}"}, "Toggle(\"\", isOn: $viewModel.data.agreed)"),
    ],
)
def test_widget_kinds_dispatch(data, expected):
    text = convert(data)

    assert "Unsupported component" not in text
    assert expected in text


def test_slider_value_change_handler():
    text = convert({"kind": "Slider", "value": "@{volume}", "onValueChange": "@{onVolume}"})

    assert text.splitlines() == [
        "Slider(value: $viewModel.data.volume, in: 0...1)",
        "    .onChange(of: viewModel.data.volume) { _ in viewModel.onVolume() }",
    ]


def test_segment_items_are_tagged_by_index():
    text = convert({"kind": "Segment", "items": ["Day", "Week"], "selectedIndex": "@{tab}"})

    assert text.splitlines() == [
        'Picker("", selection: $viewModel.data.tab) {',
        '    Text("Day").tag(0)',
        '    Text("Week").tag(1)',
        "}",
        "    .pickerStyle(.segmented)",
    ]


def test_radio_selects_its_value_in_group():
    text = convert(
        {"kind": "Radio", "id": "monthly", "group": "@{plan}", "text": "Monthly", "onClick": "@{onPlan}"}
    )
    lines = text.splitlines()

    assert lines[0] == 'Button(action: { viewModel.data.plan = "monthly"; viewModel.onPlan() }) {'
    assert (
        '        Image(systemName: viewModel.data.plan == "monthly" '
        '? "largecircle.fill.circle" : "circle")'
    ) in lines
    assert '        Text("Monthly")' in lines
    assert ".onTapGesture" not in text


def test_stopped_indicator_is_empty():
    assert convert({"kind": "Indicator", "isAnimating": False}) == "EmptyView()"


def test_gradient_view_background():
    text = convert(
        {
            "kind": "GradientView",
            "gradient": ["#FF0000", "#0000FF"],
            "gradientDirection": "Horizontal",
            "child": [{"kind": "Label", "text": "a"}],
        }
    )

    assert text.startswith("ZStack(alignment: .topLeading) {")
    assert (
        '    .background(LinearGradient(colors: [Color(hex: "#FF0000"), Color(hex: "#0000FF")], '
        "startPoint: .leading, endPoint: .trailing))"
    ) in text.splitlines()


def test_single_column_collection_is_a_list():
    text = convert({"kind": "Collection", "columns": 1, "child": [{"kind": "Label", "text": "a"}]})

    assert text.splitlines() == ["List {", '    Text("a")', "}", "    .listStyle(.plain)"]


def test_date_select_box():
    text = convert(
        {"kind": "SelectBox", "selectItemType": "Date", "prompt": "Birthday", "selectedDate": "@{born}"}
    )

    assert text == 'DatePicker("Birthday", selection: $viewModel.data.born, displayedComponents: [.date])'


def test_insets_use_the_context_model():
    registry = ConverterRegistry()
    ctx = ConversionContext(registry=registry, model="vm")
    node = LayoutNode.from_dict({"kind": "Label", "padding": "@{gap}", "marginTop": "@{gap}"})

    text = registry.convert(node, ctx).text()

    assert ".padding(CGFloat(vm.data.gap))" in text
    assert ".padding(.top, CGFloat(vm.data.gap))" in text
    assert "viewModel" not in text
