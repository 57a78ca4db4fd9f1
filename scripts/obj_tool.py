import argparse
import os
import sys

from PyObjMeshLib import Mesh, ObjError, ObjFileLoader
from PyObjMeshLib.utils.log import setup_logger


def cmd_info(args, out):
    loader = ObjFileLoader(args.file)
    print(f"{args.file}: {loader.mesh_count} mesh(es)", file=out)
    for i, m in enumerate(loader):
        print(f"  [{i}] {m.name}: vertices={m.vertex_count} normals={m.normal_count} "
              f"texcoords={m.texture_count} faces={m.face_count}", file=out)
    return 0


def cmd_rewrite(args, out):
    src = ObjFileLoader(args.input)
    dst = ObjFileLoader()
    for m in src:
        V, N, T, F = m.get_mesh_geometry(scale=args.scale)
        dst.add_mesh(Mesh(m.name, geometry=V, normals=N, texcoords=T, faces=F))
    dst.write_file(args.output)
    print(f"wrote {dst.mesh_count} mesh(es) to {args.output}", file=out)
    return 0


def cmd_show(args, out):
    from PyObjMeshLib.visualization.pyvista_backend import show_mesh
    loader = ObjFileLoader(args.file)
    show_mesh(loader.get_mesh(args.index))
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="obj_tool", description="Inspect and rewrite Wavefront OBJ meshes")
    p.add_argument("--log-level", type=str, default=os.environ.get("PYOBJ_LOG_LEVEL", "WARNING"))
    p.add_argument("--log-file", type=str, default=None)
    sub = p.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="list meshes and their sizes")
    info.add_argument("file")
    info.set_defaults(func=cmd_info)

    rewrite = sub.add_parser("rewrite", help="load and write back, optionally scaled")
    rewrite.add_argument("input")
    rewrite.add_argument("output")
    rewrite.add_argument("--scale", type=float, default=1.0)
    rewrite.set_defaults(func=cmd_rewrite)

    show = sub.add_parser("show", help="open a mesh in a pyvista window")
    show.add_argument("file")
    show.add_argument("--index", type=int, default=0)
    show.set_defaults(func=cmd_show)
    return p


def main(argv=None, out=None, err=None):
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    args = build_parser().parse_args(argv)
    setup_logger("PyObjMeshLib", level=args.log_level, log_file=args.log_file, stream=err)
    try:
        return args.func(args, out)
    except ObjError as e:
        print(f"error: {e}", file=err)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
