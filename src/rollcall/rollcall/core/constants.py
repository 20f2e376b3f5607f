"""Constants and defaults."""

DEFAULT_TIMEZONE = "Asia/Kolkata"
UID_PREFIX = "UID-"

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Label sheet geometry (column widths are in characters, heights in points)
LABEL_COLUMN_WIDTHS = (45, 3, 45, 3, 45)
LABEL_CELL_COLUMNS = (0, 2, 4)
LABEL_LINE_HEIGHT = 15
LABEL_SPACER_HEIGHT = 6
# A4 is 842pt tall; half-inch margins leave 770pt of printable height
LABEL_PAGE_HEIGHT = 770
LABEL_PAGE_MARGIN = 0.5
# The five columns are ~760pt wide, A4 leaves 523pt between margins
LABEL_PRINT_SCALE = 65

EXPORT_HEADER_FILL = "4472C4"
